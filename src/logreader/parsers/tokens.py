"""Token scanner shared by every field extractor."""
from __future__ import annotations

QUOTE = '"'
SPACE = " "


def _stop_index(line: str, start: int, end_token: str) -> int:
    """Index of the first terminator or newline at or after start."""
    stop = line.find(end_token, start)
    newline = line.find("\n", start)
    if stop == -1:
        stop = len(line)
    if newline != -1 and newline < stop:
        stop = newline
    return stop


def scan_token(line: str, start: int, end_token: str) -> tuple[str, int]:
    """Scan ``line`` from ``start`` up to the first unescaped ``end_token``.

    Returns ``(value, consumed)`` where ``consumed`` counts raw input
    characters, escape characters included and the terminator excluded.
    Scanning also stops at a newline or the end of the string.

    Two escapes are understood: a backslash makes the next character
    literal, and inside a quoted field (``end_token == '"'``) a doubled
    quote ``""`` decodes to a single ``"``.
    """
    if start >= len(line):
        return "", 0
    stop = _stop_index(line, start, end_token)
    chunk = line[start:stop]
    if "\\" not in chunk and not (end_token == QUOTE and line.startswith('""', stop)):
        return chunk, stop - start

    buf: list[str] = []
    pos = start
    length = len(line)
    while pos < length:
        ch = line[pos]
        if ch == "\n":
            break
        if ch == end_token:
            if ch == QUOTE and pos + 1 < length and line[pos + 1] == QUOTE:
                buf.append(QUOTE)
                pos += 2
                continue
            break
        if ch == "\\":
            pos += 1
            if pos >= length:
                break
            ch = line[pos]
        buf.append(ch)
        pos += 1
    return "".join(buf), pos - start
