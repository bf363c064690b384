"""Error kinds and input types shared by parser and printer."""
from __future__ import annotations

from pathlib import Path
from typing import IO, Union

FileLike = Union[str, Path, IO]
"""Anything the file opener accepts: a path or a (binary or text) stream."""


class VersoError(Exception):
    """Base class of all errors raised deliberately by this package."""


class ConfigurationError(VersoError, ValueError):
    """Raised when a dialect's attributes are invalid or inconsistent with each other."""


class HeaderError(VersoError, ValueError):
    """Raised when a header is missing a column name, contains a forbidden duplicate,
    or when records are accessed by name without a header mapping."""


class TokenizeError(VersoError):
    """Raised on malformed input or when the character source cannot be read.

    Records produced before the error remain valid, but the parser shouldn't be used anymore.
    """

    def __init__(self, msg: str, line: int | None = None) -> None:
        super().__init__(msg)
        self.line = line


class EmptyFileError(VersoError):
    """Raised when a binary file read() returns 0 bytes."""


SinkError = OSError
"""Failures writing to a print sink are the sink's own errors, propagated unchanged."""
