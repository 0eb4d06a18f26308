"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class ConvertioCliError(Exception):
    """Base exception for all application-specific errors."""


class RemoteRejection(ConvertioCliError):
    """Raised when the conversion service answers with a non-success code."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class TransportError(ConvertioCliError):
    """Raised when the conversion service cannot be reached or times out."""


class DecodeError(ConvertioCliError):
    """Raised when a downloaded payload is not valid base64 text."""


class LocalIOError(ConvertioCliError):
    """Raised when a local input file cannot be read or an output file written."""


class ConfigurationError(ConvertioCliError):
    """Raised for issues related to configuration loading or validation."""


class InvalidTransitionError(ConvertioCliError):
    """Raised when a conversion session is moved out of a terminal state."""
