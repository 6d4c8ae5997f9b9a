"""Exception taxonomy for extraction failures.

Every per-file failure is an ExtractionError subclass carrying the path and,
where there is one, the underlying cause. Cancellation is not an
ExtractionError: it is never converted into a failed result.
"""
from __future__ import annotations

from .models import ErrorKind


class DoctextError(Exception):
    """Base class for all doctext errors."""


class ExtractionError(DoctextError):
    """A single file could not be turned into text."""

    kind: ErrorKind = ErrorKind.DECODE_FAILURE

    def __init__(self, path: str, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.path = path
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class UnsupportedFormatError(ExtractionError):
    """No registered extractor claims the path."""

    kind = ErrorKind.UNSUPPORTED


class FileMissingError(ExtractionError):
    """The path does not exist when extraction is attempted."""

    kind = ErrorKind.NOT_FOUND


class DecodeError(ExtractionError):
    """An extractor failed to parse the document."""

    kind = ErrorKind.DECODE_FAILURE


class AccessError(ExtractionError):
    """Permission, lock, or other OS-level access failure."""

    kind = ErrorKind.ACCESS_FAILURE


class ExtractionCancelled(DoctextError):
    """Raised when a cancellation signal has been observed."""


def classify_error(path: str, error: BaseException) -> ExtractionError:
    """Map an arbitrary exception onto the extraction error taxonomy."""
    if isinstance(error, ExtractionError):
        return error
    detail = f"{type(error).__name__}: {error}"
    if isinstance(error, FileNotFoundError):
        return FileMissingError(path, f"File not found: {path}", error)
    if isinstance(error, OSError):
        # PermissionError, IsADirectoryError, sharing violations, ...
        return AccessError(path, f"Cannot access {path}: {detail}", error)
    return DecodeError(path, f"Error extracting text from {path}: {detail}", error)
