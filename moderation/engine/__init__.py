# moderation/engine/__init__.py

"""Engine package providing request payload construction and response parsing.

This package translates between the analysis service's JSON documents and
the library's domain types.
"""
