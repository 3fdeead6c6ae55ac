# moderation/core/exceptions.py

"""Custom exception hierarchy for the moderation scoring client.

This module defines the specific error types used throughout the library
to differentiate between configuration, argument, transport, and response
format errors.
"""

from typing import Optional


class ModerationError(Exception):
    """Base exception for all library-specific errors."""

    pass


class ConfigurationError(ModerationError):
    """Raised when configuration loading or validation fails."""

    pass


class ValidationError(ModerationError, ValueError):
    """Raised when argument validation fails (e.g., empty text, bad span range)."""

    pass


class TransportError(ModerationError):
    """Raised when the analysis request fails at the HTTP level.

    Attributes:
        status_code: HTTP status returned by the service, or None when the
            request never produced a response (connection error, timeout)
        body: Error body text returned by the service, if any
    """

    def __init__(
        self, message: str, status_code: Optional[int] = None, body: str = ""
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResponseFormatError(ModerationError):
    """Raised when the response body is not a JSON object."""

    pass
