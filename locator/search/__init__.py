"""Interactive search: debounced keystroke lookups and suggestion-list state.

- adapter.py: SearchSession, UIAction
"""
