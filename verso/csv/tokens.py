"""The units produced by the tokenizer."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TokenType(str, Enum):
    INVALID = "INVALID"
    """Malformed input, e.g. an unterminated quoted field."""
    FIELD = "FIELD"
    """A field followed by a delimiter."""
    END_OF_RECORD = "END_OF_RECORD"
    """The last field of a record, followed by a line break."""
    END_OF_FILE = "END_OF_FILE"
    """The end of the input, possibly carrying a last, unterminated field."""
    COMMENT = "COMMENT"
    """A whole line of comment (without the marker)."""


@dataclass
class Token:
    """Scratch token filled in by the tokenizer and reset between calls.

    ``ready`` signals that the token carries a (possibly empty) field to be consumed.
    """

    type: TokenType = TokenType.INVALID
    content: list[str] = field(default_factory=list)
    quoted: bool = False
    ready: bool = False

    def reset(self) -> Token:
        self.type = TokenType.INVALID
        self.content.clear()
        self.quoted = False
        self.ready = False
        return self

    def append(self, text: str):
        self.content.append(text)

    @property
    def text(self) -> str:
        return "".join(self.content)

    def __str__(self):
        return f"{self.type.value} [{self.text}]"
