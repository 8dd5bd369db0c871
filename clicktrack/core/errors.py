"""
Encoder error kinds. Both are recoverable: callers report them and may encode again.
"""
from typing import Optional


class EncodeError(Exception):
    """Base class for click track encoding failures."""


class InvalidParameters(EncodeError, ValueError):
    """A beat spec field is missing, non-positive or not a number."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class EncodeIOError(EncodeError, OSError):
    """The destination WAV file could not be opened or written."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message)
        self.filename = filename

    def __str__(self) -> str:
        return self.args[0] if self.args else ""
