"""Opening of files as text streams, detecting their character encoding if necessary."""
from __future__ import annotations

import codecs
import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import IO, BinaryIO, TextIO

import cchardet as cdet

from ..log import LOG
from ..utils import reset_buffer
from .abc import EmptyFileError, FileLike
from .dialects import Dialect
from .parser import Parser

BOMS: dict[str, tuple[bytes, ...]] = {
    "utf-8-sig": (codecs.BOM_UTF8,),
    "utf-32": (codecs.BOM_UTF32_LE, codecs.BOM_UTF32_BE),
    "utf-16": (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE),
}
"""Map BOM (Byte-order mark) to encoding. UTF-32 first, since its LE BOM starts with UTF-16's."""


MAX_INT32: int = 2_147_483_647
"""Cannot read more than this number of bytes at once to detect encoding."""

CODEC_ERR_CHAR = "\N{REPLACEMENT CHARACTER}"
"""Character representing non-codable bytes."""


def detect_bom(bs: bytes):
    """Detect encoding by looking for a BOM at the start of the file."""
    for enc, boms in BOMS.items():
        if any(bs.startswith(bom) for bom in boms):
            return enc

    return None


def prop_decoding_errors(bs: bytes, encoding: str) -> float:
    """The proportion of characters that couldn't be decoded correctly."""
    string = bytes.decode(bs, encoding, errors="replace")
    if not string:
        return 0.0

    n_err = string.count(CODEC_ERR_CHAR)
    return n_err / len(string)


def is_empty(buffer: IO) -> bool:
    """Check if a binary or text buffer is empty (from current position onwards)."""
    with reset_buffer(buffer):
        return len(buffer.read(1)) == 0


def is_binary(buffer: IO) -> bool:
    return isinstance(buffer, (io.BufferedIOBase, io.RawIOBase))


@dataclass
class EncodingDetector(ABC):
    """Base class specifying interface for all encoding detetors."""

    @abstractmethod
    def detect(self, buffer: BinaryIO) -> str:
        """Implement me."""


@dataclass
class Chardet(EncodingDetector):
    """An encoding detector using cchardet if the default utf-8 generates too many errors."""

    n_bytes: int = int(1e7)  # 10 MB
    """Use this many bytes to detect encoding."""
    error_threshold: float = 0.05
    """A greater proportion of decoding errors than this will be considered a failed encoding."""
    confidence_threshold: float = 0.6
    """Minimum level of confidence to accept an encoding automatically detected by cchardet."""

    def detect(self, buffer: BinaryIO) -> str:
        """Somewhat 'opinionated' encoding detection.

        Assumes utf-8 as most common encoding, falling back on cchardet detection, and
        if all else fails on windows-1250 if encoding is latin-like.
        """
        head: bytes = buffer.read(min(self.n_bytes, MAX_INT32))

        bom_encoding = detect_bom(head)
        if bom_encoding:
            return bom_encoding

        if prop_decoding_errors(head, "utf-8") <= self.error_threshold:
            return "utf-8"

        detected = cdet.detect(head)
        encoding, confidence = detected["encoding"], detected["confidence"]

        if encoding and confidence > self.confidence_threshold:
            return encoding

        # Iso-like or unknown, will use windows-1250 as super set for special chars
        return "windows-1250"


def open_text(
    fp: FileLike,
    encoding: str | EncodingDetector | None = None,
    allow_empty: bool = False,
    log: bool = False,
) -> tuple[TextIO, str]:
    """Make sure we have a text stream, returning it together with its encoding.

    Paths are opened (binary if the encoding needs to be detected), binary streams are decoded and
    text streams returned as they are. Line breaks are never translated, since the tokenizer
    handles CR, LF and CRLF itself.
    """
    encoding = encoding or Chardet()
    buffer = fp

    if isinstance(buffer, (str, Path)):
        if isinstance(encoding, str):
            buffer = open(buffer, encoding=encoding, errors="replace", newline="")  # noqa: SIM115
        else:
            buffer = open(buffer, "rb")  # noqa: SIM115

    if not allow_empty and buffer.seekable() and is_empty(buffer):
        if buffer is not fp:
            buffer.close()
        raise EmptyFileError(f"The passed object ({fp}) contained 0 bytes of data.")

    if is_binary(buffer):
        if isinstance(encoding, EncodingDetector):
            with reset_buffer(buffer):
                encoding = encoding.detect(buffer)

        buffer = io.TextIOWrapper(buffer, encoding=encoding, errors="replace", newline="")
    elif not isinstance(encoding, str):
        encoding = getattr(buffer, "encoding", None) or "utf-8"

    if log:
        LOG.info(f"Reading {fp} with encoding '{encoding}'")

    return buffer, encoding


def parse_file(
    fp: FileLike,
    dialect: Dialect | None = None,
    encoding: str | EncodingDetector | None = None,
    allow_empty: bool = False,
    log: bool = False,
) -> Parser:
    """A parser over the decoded file. Closing the parser closes the file."""
    buffer, _ = open_text(fp, encoding=encoding, allow_empty=allow_empty, log=log)
    return Parser(buffer, dialect=dialect, log=log)
