"""
TimeWindow: a time-bounded deque with lazy, cutoff-based eviction.

Entries are appended in timestamp order; anything older than ``max_age_s``
relative to the newest append (or an explicit ``prune(now)``) is dropped
from the left.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Generic, Iterator, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class TimeWindow(Generic[T]):

    def __init__(self, max_age_s: float):
        self.max_age_s = max_age_s
        self._entries: Deque[Tuple[float, Optional[T]]] = deque()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[float, Optional[T]]]:
        return iter(self._entries)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, ts: float, item: Optional[T] = None) -> None:
        self._entries.append((ts, item))
        self.prune(ts)

    def prune(self, now: float) -> int:
        """Evict entries at or before ``now - max_age_s``; returns the number dropped."""
        cutoff = now - self.max_age_s
        dropped = 0
        while self._entries and self._entries[0][0] <= cutoff:
            self._entries.popleft()
            dropped += 1
        return dropped

    def clear(self) -> None:
        self._entries.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def count_since(self, cutoff: float) -> int:
        """Entries strictly newer than *cutoff*."""
        return sum(1 for ts, _ in self._entries if ts > cutoff)

    def items_since(self, cutoff: float) -> List[Tuple[float, Any]]:
        return [(ts, item) for ts, item in self._entries if ts > cutoff]

    def first(self) -> Optional[Tuple[float, Optional[T]]]:
        return self._entries[0] if self._entries else None

    def last(self) -> Optional[Tuple[float, Optional[T]]]:
        return self._entries[-1] if self._entries else None
