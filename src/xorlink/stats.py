"""Offset usage histogram for keystream diagnostics."""

import threading
from typing import Iterator, Optional, Tuple


class OffsetHistogram:
    """
    Counts how often each subkey offset has been selected.

    A single histogram may be attached to a cipher shared between threads,
    so every access goes through one lock.
    """

    def __init__(self) -> None:
        self._counts: dict[int, int] = {}
        self._lock = threading.Lock()

    def record(self, offset: int) -> None:
        """Record one use of ``offset``."""
        with self._lock:
            self._counts[offset] = self._counts.get(offset, 0) + 1

    def count(self, offset: int) -> int:
        """Number of times ``offset`` was used."""
        with self._lock:
            return self._counts.get(offset, 0)

    @property
    def distinct(self) -> int:
        """Number of distinct offsets seen."""
        with self._lock:
            return len(self._counts)

    @property
    def total(self) -> int:
        """Total number of recorded uses."""
        with self._lock:
            return sum(self._counts.values())

    @property
    def min_offset(self) -> Optional[int]:
        with self._lock:
            return min(self._counts) if self._counts else None

    @property
    def max_offset(self) -> Optional[int]:
        with self._lock:
            return max(self._counts) if self._counts else None

    def items(self) -> Iterator[Tuple[int, int]]:
        """Iterate ``(offset, count)`` pairs in offset order, from a snapshot."""
        with self._lock:
            snapshot = sorted(self._counts.items())
        return iter(snapshot)

    def clear(self) -> None:
        """Forget all recorded offsets."""
        with self._lock:
            self._counts.clear()

    def format(self) -> str:
        """Render as ``offset: count`` lines."""
        return "\n".join(f"{offset}: {count}" for offset, count in self.items())
