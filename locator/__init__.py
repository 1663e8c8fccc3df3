"""Place-name resolution services.

Turns free-text place names into coordinates via an upstream geocoding source,
deciding between an automatic pick and a list of choices for the user.
"""
