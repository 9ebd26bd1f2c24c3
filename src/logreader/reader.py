"""Iterate over an access log, yielding one record per line.

Usage::

    from logreader.reader import ApacheReader

    reader = ApacheReader("/var/log/apache2/access.log")
    for fields in reader:
        print(fields["status"], reader.curline)

    # already-open files, generators and lists of lines work too
    reader = ApacheReader(iter(lines), ApacheReader.COMMON)
"""
from __future__ import annotations

import logging
import os
from typing import Iterable, Iterator

from .errors import MatchError
from .parsers.apache import ApacheParser, parse_line
from .parsers.formats import COMBINED, COMMON, LogEntry

logger = logging.getLogger(__name__)

LineSource = str | os.PathLike[str] | Iterable[str] | Iterable[bytes]


def _numbered(lines: Iterable[str] | Iterable[bytes]) -> Iterator[tuple[int, str | bytes, str]]:
    for lineno, raw in enumerate(lines, start=1):
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        stripped = text.rstrip("\r\n")
        if stripped:
            yield lineno, raw, stripped


def iter_lines(source: LineSource) -> Iterator[tuple[int, str | bytes, str]]:
    """Yield ``(line number, raw line, text)`` for every non-blank line.

    A line is blank when it is empty once its trailing newline is stripped;
    ``text`` is the line without that newline. A path is opened lazily and
    closed when iteration finishes.
    """
    if isinstance(source, (str, os.PathLike)):
        path = os.fspath(source)
        logger.debug("Opening %s", path)
        with open(path, encoding="utf-8", errors="replace") as fh:
            yield from _numbered(fh)
        logger.debug("Closed %s", path)
        return
    yield from _numbered(source)


class ApacheReader:
    """Parse an access log given as a path or as an iterable of lines.

    Blank lines (empty once the trailing newline is stripped) are skipped.
    ``curline`` holds the raw text of the line behind the last record and
    ``lines_read`` its line number.

    With ``skip_invalid`` set, lines that don't match the format are logged
    and dropped instead of raising MatchError. A bad format always raises.

    Args:
        source:       Path to a log file, or any iterable of str/bytes lines.
        format:       Format string or named format ('common', 'combined').
        skip_invalid: Skip non-matching lines instead of raising.
    """

    COMMON = COMMON
    COMBINED = COMBINED
    parse_line = staticmethod(parse_line)

    def __init__(
        self,
        source: LineSource,
        format: str = COMBINED,
        skip_invalid: bool = False,
    ) -> None:
        if not isinstance(source, (str, os.PathLike)) and not hasattr(source, "__iter__"):
            raise TypeError("expected filename or iterable object")

        self._source = source
        self._parser = ApacheParser(format)
        self.skip_invalid = skip_invalid
        self.curline: str | bytes = ""
        self.lines_read = 0
        self.rejected = 0
        self._records: Iterator[LogEntry] | None = None

    @property
    def format(self) -> str:
        return self._parser.format

    def __iter__(self) -> Iterator[LogEntry]:
        return self

    def __next__(self) -> LogEntry:
        if self._records is None:
            self._records = self._generate()
        return next(self._records)

    def _generate(self) -> Iterator[LogEntry]:
        for lineno, raw, text in iter_lines(self._source):
            self.lines_read = lineno
            self.curline = raw
            try:
                entry = self._parser.parse_line(text)
            except MatchError as exc:
                if not self.skip_invalid:
                    raise
                self.rejected += 1
                logger.warning("Skipping line %d: %s", lineno, exc)
                continue
            if entry is not None:
                yield entry
