"""Common helpers shared by the tokenizer, the quoting engine and the bridges."""
from __future__ import annotations

from contextlib import contextmanager
from numbers import Number
from time import perf_counter

CR: str = "\r"
LF: str = "\n"
CRLF: str = "\r\n"
SP: str = " "
TAB: str = "\t"
BACKSPACE: str = "\b"
FF: str = "\f"
COMMENT: str = "#"
"""Conservative comment guard used by minimal quoting, even when comments are disabled."""

EOF: str = ""
"""What a reader returns once the character source is exhausted."""

CONTROL_CHARS: str = "".join(chr(i) for i in range(ord(SP) + 1))
"""All characters with a code point <= space, i.e. what ``trim()`` removes."""


def trim(value: str) -> str:
    """Remove leading and trailing characters with code points <= space.

    Not the same as ``str.strip()``, which also removes unicode whitespace such as ``\\xa0``,
    but not control characters like ``\\x00``.
    """
    return value.strip(CONTROL_CHARS)


def is_number(value) -> bool:
    """Whether a (pre-stringification) value is numeric. Booleans don't count."""
    if isinstance(value, bool):
        return False

    return isinstance(value, Number)


def contains_line_break(value: str) -> bool:
    return CR in value or LF in value


def uniquify(items: list[str]) -> list[str]:
    """Add numeric suffixes to repeated items until all are unique (first occurrence is kept)."""
    seen = set()
    result = []

    for item in items:
        name = item
        i = 0
        while name in seen:
            i += 1
            name = f"{item}_{i}"

        seen.add(name)
        result.append(name)

    return result


@contextmanager
def reset_buffer(buffer):
    """Caches and resets buffer position."""
    cursor = buffer.tell()
    yield
    buffer.seek(cursor)


class Timer:
    def __enter__(self):
        self.start = perf_counter()
        return self

    def __exit__(self, type, value, traceback):
        self.end = perf_counter()
        self.elapsed = self.end - self.start
