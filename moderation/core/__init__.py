# moderation/core/__init__.py

"""Core domain models and utilities used across the moderation client.

This package provides the attribute catalog, result types, and exceptions
shared by the rest of the library.
"""
