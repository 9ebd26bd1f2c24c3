"""Exceptions raised while parsing access-log lines.

All of them derive from ``ValueError`` so callers that only care about
"this line is bad" can catch the builtin.
"""
from __future__ import annotations


class ParseError(ValueError):
    """Base class for every failure to turn a line into a record."""


class FormatError(ParseError):
    """The format specification itself is invalid.

    Raised for unknown specifier characters, an unsupported character after
    ``%>``, a dangling ``%`` and unterminated ``%{Name}i`` captures.
    """

    def __init__(self, message: str, fmt: str = "", position: int = -1) -> None:
        super().__init__(message)
        self.fmt = fmt
        self.position = position

    def __reduce__(self):
        return (type(self), (str(self), self.fmt, self.position))


class MatchError(ParseError):
    """A literal character in the format did not match the input."""

    def __init__(self, expected: str, actual: str, position: int) -> None:
        shown = actual if actual else "<end of line>"
        super().__init__(
            f"Input doesn't match format string: {expected!r} != {shown!r} "
            f"at offset {position}"
        )
        self.expected = expected
        self.actual = actual
        self.position = position

    def __reduce__(self):
        return (type(self), (self.expected, self.actual, self.position))
