"""Exceptions raised by the conversion pipeline."""


class ConversionError(Exception):
    """Base class for all conversion errors."""


class DocumentLoadError(ConversionError):
    """Raised when a document cannot be fetched or parsed."""

    def __init__(self, location: str, reason: str):
        super().__init__(f"Failed to load {location}: {reason}")
        self.location = location
        self.reason = reason


class FetchError(DocumentLoadError):
    """Raised when a document cannot be retrieved from its location."""


class ConfigError(ConversionError):
    """Raised for unreadable or invalid settings files."""
