# moderation/service/__init__.py

"""Service package providing configuration and the analysis client."""
