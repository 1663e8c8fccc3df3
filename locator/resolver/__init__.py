"""Location Resolver package.

Resolves a free-text place name to a single place or a list of candidates with
display label, short name and coordinates. See `locator/resolver/core.py`.
"""
