"""Subpackage for parsing and printing CSV in many dialects.

Contains the dialect configuration, the tokenizer and record assembly on the parsing side, and
the quoting engine on the printing side.
"""
from .abc import (
    ConfigurationError,
    EmptyFileError,
    HeaderError,
    SinkError,
    TokenizeError,
    VersoError,
)
from .dialects import (
    DEFAULT,
    EXCEL,
    INFORMIX_UNLOAD,
    INFORMIX_UNLOAD_CSV,
    MONGODB_CSV,
    MONGODB_TSV,
    MYSQL,
    ORACLE,
    POSTGRESQL_CSV,
    POSTGRESQL_TEXT,
    RFC4180,
    TDF,
    Dialect,
    DialectBuilder,
    Preset,
    QuoteMode,
    get_preset,
)
from .encodings import Chardet, open_text, parse_file
from .headers import Headers
from .parser import Parser
from .printer import Printer, format_record
from .quoting import QuotingEngine
from .records import Record, Records
from .tokenizer import Tokenizer
from .tokens import Token, TokenType

__all__ = [
    "Chardet",
    "ConfigurationError",
    "DEFAULT",
    "Dialect",
    "DialectBuilder",
    "EmptyFileError",
    "EXCEL",
    "format_record",
    "get_preset",
    "HeaderError",
    "Headers",
    "INFORMIX_UNLOAD",
    "INFORMIX_UNLOAD_CSV",
    "MONGODB_CSV",
    "MONGODB_TSV",
    "MYSQL",
    "open_text",
    "ORACLE",
    "parse_file",
    "Parser",
    "POSTGRESQL_CSV",
    "POSTGRESQL_TEXT",
    "Preset",
    "Printer",
    "QuoteMode",
    "QuotingEngine",
    "Record",
    "Records",
    "RFC4180",
    "SinkError",
    "TDF",
    "Token",
    "TokenizeError",
    "Tokenizer",
    "TokenType",
    "VersoError",
]
