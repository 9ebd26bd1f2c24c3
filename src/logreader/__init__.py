"""logreader — fast Apache access-log parsing.

    >>> from logreader import parse_line, COMMON
    >>> parse_line('127.0.0.1 - - [10/Oct/2023:13:55:36 -0700] "GET / HTTP/1.0" 200 -', COMMON)["size"]
    -1
"""
from __future__ import annotations

from .errors import FormatError, MatchError, ParseError
from .parsers.apache import ApacheParser, parse_line
from .parsers.formats import COMBINED, COMMON, FORMATS, LogEntry, compile_format
from .reader import ApacheReader

__all__ = [
    "ApacheParser",
    "ApacheReader",
    "COMBINED",
    "COMMON",
    "FORMATS",
    "FormatError",
    "LogEntry",
    "MatchError",
    "ParseError",
    "compile_format",
    "parse_line",
]
