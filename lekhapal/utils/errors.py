"""
Custom Exception Classes
========================

Application-specific exceptions for proper error handling.

Every error is scoped to a single upload / edit / save action and carries
the HTTP status code the API layer answers with.
"""

from typing import Any


class LekhapalError(Exception):
    """Base exception for the tables service."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnsupportedFileTypeError(LekhapalError):
    """Raised when a file matches none of the CSV, spreadsheet or extraction categories."""

    status_code = 400


class ParsingError(LekhapalError):
    """Raised when a local CSV or spreadsheet buffer cannot be decoded."""

    status_code = 500


class InvalidExtractionResponseError(LekhapalError):
    """
    Raised when the extraction output is not JSON even after cleaning.

    ``details`` always holds both the ``raw`` and the ``cleaned`` text.
    """

    status_code = 500


class NoTablesExtractedError(LekhapalError):
    """Raised when the payload was valid but produced no usable table."""

    status_code = 422


class UpstreamApiError(LekhapalError):
    """Raised when the extraction provider fails (network, auth, 5xx)."""

    status_code = 502


class PersistenceError(LekhapalError):
    """Raised when a datastore read or write fails."""

    status_code = 500


class ValidationError(LekhapalError):
    """Raised when input validation fails."""

    status_code = 400


class FileSizeError(LekhapalError):
    """Raised when a file exceeds the maximum allowed size."""

    status_code = 413


class NotFoundError(LekhapalError):
    """Raised when a stored table or document does not exist."""

    status_code = 404


class TableEditError(LekhapalError):
    """Raised when an edit addresses a table, row or column that does not exist."""

    status_code = 400


class ConfigurationError(LekhapalError):
    """Raised when configuration is invalid."""

    pass
