"""
Error types for the text dictionary.

Every error raised by the package derives from ``TextDictError`` and carries
an ``ErrorCode`` so callers (and the CLI) can report failures uniformly.
Where a builtin exception already describes the failure, the error also
derives from it, so ``except FileNotFoundError`` keeps working.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Error codes."""
    MALFORMED_ENTRY = "MALFORMED_ENTRY"
    ENCODING_ERROR = "ENCODING_ERROR"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_WRITE_ERROR = "FILE_WRITE_ERROR"
    UNREPRESENTABLE_ENTRY = "UNREPRESENTABLE_ENTRY"


class TextDictError(Exception):
    """Base class for all text dictionary errors."""
    code: ErrorCode = ErrorCode.MALFORMED_ENTRY


class MalformedEntryError(TextDictError, ValueError):
    """
    A dictionary line cannot be parsed.

    Raised when a line has no tab separating key and values, or when the
    value list is empty. A single malformed line aborts the whole load.
    """
    code = ErrorCode.MALFORMED_ENTRY

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line: Optional[bytes] = None
    ):
        super().__init__(message)
        self.line_number = line_number
        self.line = line


class EncodingError(TextDictError, ValueError):
    """A byte sequence has no valid UTF-8 character boundary interpretation."""
    code = ErrorCode.ENCODING_ERROR

    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.offset = offset


class DuplicateKeyError(TextDictError, KeyError):
    """A key was inserted twice while duplicates are rejected."""
    code = ErrorCode.DUPLICATE_KEY

    def __init__(self, key: bytes):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Duplicate key: {self.key.decode('utf-8', errors='replace')!r}"


class DictFileNotFoundError(TextDictError, FileNotFoundError):
    """A dictionary path could not be opened for reading."""
    code = ErrorCode.FILE_NOT_FOUND


class FileWriteError(TextDictError, OSError):
    """A dictionary path could not be opened for writing."""
    code = ErrorCode.FILE_WRITE_ERROR


class UnrepresentableEntryError(TextDictError, ValueError):
    """An entry contains bytes the text format cannot express."""
    code = ErrorCode.UNREPRESENTABLE_ENTRY
