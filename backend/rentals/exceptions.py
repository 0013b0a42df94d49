"""
Exception types raised by the ingestion backend.

Recoverable errors (missing or unreadable sources, invalid records) are
handled inside the pipeline. StorageError and ConfigurationError abort
the run.
"""


class RentalsError(Exception):
    """Base class for all ingestion errors."""


class ConfigurationError(RentalsError):
    """Required configuration is missing or malformed."""


class SourceNotFoundError(RentalsError):
    """A configured source file does not exist."""

    def __init__(self, file_name: str, path=None):
        self.file_name = file_name
        self.path = path
        super().__init__(f"Source file not found: {path or file_name}")


class ParseError(RentalsError):
    """Source content could not be decoded as text."""


class InvalidRecordError(RentalsError):
    """A normalized record failed validation and cannot be stored."""


class StorageError(RentalsError):
    """A storage lookup or write failed."""
