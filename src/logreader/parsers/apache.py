"""Apache access-log parser driven by a format string.

The format is walked once, left to right. Literal characters must match the
line exactly; ``%`` specifiers hand the cursor to a field extractor, which
reports how far it got. Matching a literal ``"`` flips the parser into (or
out of) quoted mode, so the next token ends at a double quote instead of a
space. There is no backtracking, which is why this beats a regex per line.
"""
from __future__ import annotations

from ..errors import MatchError
from .fields import EXTRACTORS
from .formats import COMBINED, FormatSpec, LogEntry, compile_format, resolve_format


def _decode(line: str | bytes) -> str:
    if isinstance(line, bytes):
        return line.decode("utf-8", errors="replace")
    return line


def parse_compiled(line: str, spec: FormatSpec) -> LogEntry:
    """Run a compiled format over one line and return the record.

    Raises MatchError when a literal character differs from the input.
    """
    record: LogEntry = {}
    pos = 0
    quoted = False
    length = len(line)
    for seg in spec:
        if seg.is_literal:
            actual = line[pos] if pos < length else ""
            if actual != seg.text:
                raise MatchError(seg.text, actual, pos)
            if actual == '"':
                quoted = not quoted
            pos += 1
        else:
            pos += EXTRACTORS[seg.code](line, pos, record, seg.field, quoted)
    return record


def parse_line(line: str | bytes, format: str = COMBINED) -> LogEntry | None:
    """Parse one log line using ``format`` (default: Apache combined).

    Returns None for a zero-length line. ``format`` may be a format string
    or one of the names 'common' / 'combined'.

    Raises FormatError for a bad format and MatchError for a line that does
    not fit it.
    """
    text = _decode(line)
    if not text:
        return None
    return parse_compiled(text, compile_format(resolve_format(format)))


class ApacheParser:
    """Parse lines of a single Apache log format.

    The format is compiled once, so a bad format raises FormatError at
    construction rather than on the first line.
    """

    def __init__(self, format: str = COMBINED) -> None:
        self.format = resolve_format(format)
        self._spec = compile_format(self.format)

    def parse_line(self, line: str | bytes) -> LogEntry | None:
        text = _decode(line)
        if not text:
            return None
        return parse_compiled(text, self._spec)
