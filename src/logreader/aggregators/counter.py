"""Count log records by a field value."""
from __future__ import annotations

from collections import Counter as _Counter
from typing import Any


class Counter:
    """Count occurrences of a field value across log records.

    List-valued fields (``ips``) count every element once.
    """

    def __init__(self, field: str) -> None:
        self._field = field
        self._counts: _Counter[str] = _Counter()

    def add(self, entry: dict[str, Any]) -> None:
        value = entry.get(self._field, "unknown")
        if isinstance(value, list):
            self._counts.update(str(v) for v in value)
        else:
            self._counts[str(value)] += 1

    def top(self, n: int = 10) -> list[tuple[str, int]]:
        return self._counts.most_common(n)

    @property
    def total(self) -> int:
        return sum(self._counts.values())
