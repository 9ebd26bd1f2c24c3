"""Format strings, the compiled segment form, and the record type.

Apache format strings look like ``%h %l %u %t "%r" %>s %b``: every ``%``
introduces a specifier, every other character must appear verbatim in the
log line.

Common:   %h %l %u %t "%r" %>s %b
Combined: Common + "%{Referer}i" "%{User-Agent}i"
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from ..errors import FormatError

logger = logging.getLogger(__name__)

# One parsed line: field name -> list[str] | str | int | datetime | None
LogEntry = dict[str, object]

COMMON = '%h %l %u %t "%r" %>s %b'
COMBINED = '%h %l %u %t "%r" %>s %b "%{Referer}i" "%{User-Agent}i"'

FORMATS: dict[str, str] = {
    "common": COMMON,
    "combined": COMBINED,
}

# Specifier character -> record field it fills
SPECIFIER_FIELDS: dict[str, str] = {
    "h": "ips",
    "l": "ident",
    "u": "username",
    "t": "time",
    "r": "request",
    "b": "size",
    "D": "elapsed",
}

# %{Name}i captures with a fixed lower-case field name
HEADER_FIELDS: dict[str, str] = {
    "Referer": "referer",
    "User-Agent": "user-agent",
    "Host": "host",
}


@dataclass(frozen=True, slots=True)
class Segment:
    """One step of a compiled format.

    ``code`` is ``""`` for a literal character (held in ``text``), otherwise
    the specifier code: ``h l u t r b D s`` or ``i`` for a header capture.
    ``field`` is the record key the specifier writes.
    """

    code: str
    text: str = ""
    field: str = ""

    @property
    def is_literal(self) -> bool:
        return not self.code


FormatSpec = tuple[Segment, ...]


@lru_cache(maxsize=128)
def compile_format(fmt: str) -> FormatSpec:
    """Compile a format string into an immutable tuple of segments.

    Raises FormatError for unknown specifiers, ``%>`` not followed by
    ``s``, a trailing ``%`` and unterminated ``%{Name}i`` captures.
    """
    segments: list[Segment] = []
    i = 0
    n = len(fmt)
    while i < n:
        ch = fmt[i]
        if ch != "%":
            segments.append(Segment("", text=ch))
            i += 1
            continue

        i += 1
        code = fmt[i] if i < n else ""
        if code in SPECIFIER_FIELDS:
            segments.append(Segment(code, field=SPECIFIER_FIELDS[code]))
        elif code == ">":
            i += 1
            after = fmt[i] if i < n else ""
            if after != "s":
                raise FormatError(
                    f"Unknown format char after '>': {after!r}", fmt, i
                )
            segments.append(Segment("s", field="status"))
        elif code == "{":
            end = fmt.find("}i", i + 1)
            if end == -1:
                raise FormatError("closing token not found }i", fmt, i)
            name = fmt[i + 1:end]
            segments.append(Segment("i", field=HEADER_FIELDS.get(name, name)))
            # land on the trailing "i"
            i = end + 1
        else:
            raise FormatError(f"Unknown format char: {code!r}", fmt, i)
        i += 1

    logger.debug("Compiled format %r into %d segments", fmt, len(segments))
    return tuple(segments)


def resolve_format(name_or_format: str) -> str:
    """Map a named format ('common', 'combined') to its format string.

    Anything else is taken to be a literal format string.
    """
    return FORMATS.get(name_or_format.lower(), name_or_format)


def fields_for(fmt: str) -> list[str]:
    """Return the record keys a format can produce, in format order."""
    keys: list[str] = []
    for seg in compile_format(fmt):
        if seg.is_literal:
            continue
        if seg.code == "t":
            keys.extend(["time", "tz"])
        elif seg.code == "r":
            keys.extend(["method", "path", "protocol"])
        else:
            keys.append(seg.field)
    return keys
