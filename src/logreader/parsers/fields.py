"""Field extractors, one per specifier class.

Every extractor has the same shape::

    extract(line, pos, record, name, quoted) -> consumed

It reads the token starting at ``line[pos]``, writes one or more keys into
``record`` and returns how many input characters it consumed. ``quoted``
tells it whether the token sits inside a ``"..."`` field, in which case a
double quote rather than a space ends it.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Callable

from .formats import LogEntry
from .tokens import QUOTE, SPACE, scan_token

Extractor = Callable[[str, int, LogEntry, str, bool], int]

APACHE_TIME_FORMAT = "%d/%b/%Y:%H:%M:%S"

# ASCII digits only; int() alone would take "1_000" and non-ASCII digits
_INT_RE = re.compile(r"\s*[+-]?[0-9]+\s*", re.ASCII)


def _end_token(quoted: bool) -> str:
    return QUOTE if quoted else SPACE


def parse_ips(line: str, pos: int, record: LogEntry, name: str = "ips", quoted: bool = False) -> int:
    """``%h``: one or more client addresses separated by ``", "``."""
    ips: list[str] = []
    token, consumed = scan_token(line, pos, SPACE)
    while token.endswith(","):
        ips.append(token[:-1])
        after = pos + consumed
        if after >= len(line) or line[after] != SPACE:
            # trailing comma at the end of the line: nothing follows
            record[name] = ips
            return consumed
        token, more = scan_token(line, after + 1, SPACE)
        consumed += more + 1
    ips.append(token)
    record[name] = ips
    return consumed


def parse_string(line: str, pos: int, record: LogEntry, name: str, quoted: bool = False) -> int:
    """``%l``, ``%u`` and ``%{Name}i``: the raw token."""
    value, consumed = scan_token(line, pos, _end_token(quoted))
    record[name] = value
    return consumed


def parse_int(line: str, pos: int, record: LogEntry, name: str, quoted: bool = False) -> int:
    """``%b``, ``%D`` and ``%>s``: a base-10 integer, or -1 if it isn't one.

    Apache writes ``-`` for a response without a body, which lands here.
    """
    value, consumed = scan_token(line, pos, _end_token(quoted))
    record[name] = int(value, 10) if _INT_RE.fullmatch(value) else -1
    return consumed


def parse_datetime(line: str, pos: int, record: LogEntry, name: str = "time", quoted: bool = False) -> int:
    """``%t``: ``[10/Oct/2023:13:55:36 -0700]``.

    Stores a naive ``datetime`` under ``time`` (``None`` when the date part
    does not match) and the raw offset text under ``tz``.
    """
    # skip the opening bracket
    stamp, consumed = scan_token(line, pos + 1, SPACE)
    tz, tz_consumed = scan_token(line, pos + consumed + 2, "]")
    try:
        record[name] = datetime.strptime(stamp, APACHE_TIME_FORMAT)
    except ValueError:
        record[name] = None
    record["tz"] = tz
    # brackets and the separating space
    return consumed + tz_consumed + 3


def parse_request(line: str, pos: int, record: LogEntry, name: str = "request", quoted: bool = False) -> int:
    """``%r``: split ``METHOD PATH PROTOCOL`` on its first two spaces."""
    req, consumed = scan_token(line, pos, _end_token(quoted))
    first = req.find(SPACE)
    if first == -1:
        record["bad_request"] = req
        return consumed

    record["method"] = req[:first]
    second = req.find(SPACE, first + 1)
    if second == -1:
        # protocol missing
        record["path"] = req[first + 1:]
    else:
        record["path"] = req[first + 1:second]
        record["protocol"] = req[second + 1:]
    return consumed


# Segment code -> extractor
EXTRACTORS: dict[str, Extractor] = {
    "h": parse_ips,
    "l": parse_string,
    "u": parse_string,
    "t": parse_datetime,
    "r": parse_request,
    "b": parse_int,
    "D": parse_int,
    "s": parse_int,
    "i": parse_string,
}
