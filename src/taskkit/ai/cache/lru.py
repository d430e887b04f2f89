"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/lru.py.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

from .base import CacheEntry

V = TypeVar("V")


class BoundedTTLCache(Generic[V]):
    """
    Process-local LRU cache with per-entry expiry.

    Reads and writes move the key to the most-recent end of the ordered map;
    overflow evicts from the least-recent end. Persistence is the caller's job.
    """

    def __init__(
        self,
        capacity: int,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if capacity < 1:
            raise ValueError("Cache capacity must be at least 1")
        self.capacity = capacity
        self._clock = clock
        self._rows: OrderedDict[str, CacheEntry[V]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, key: object) -> bool:
        return key in self._rows

    def get(self, key: str) -> V | None:
        row = self._rows.get(key)
        if row is None:
            return None
        if row.expired(self._clock()):
            del self._rows[key]
            return None
        self._rows.move_to_end(key)
        return row.value

    def set(self, key: str, value: V, *, ttl_s: float) -> None:
        self.restore(key, value, self._clock() + ttl_s)

    def restore(self, key: str, value: V, expires_at_s: float) -> None:
        """Insert with an absolute expiry, touching the key and enforcing capacity."""
        self._rows[key] = CacheEntry(value=value, expires_at_s=expires_at_s)
        self._rows.move_to_end(key)
        while len(self._rows) > self.capacity:
            self._rows.popitem(last=False)

    def delete(self, key: str) -> None:
        self._rows.pop(key, None)

    def clear(self) -> None:
        self._rows.clear()

    def prune(self) -> int:
        """Drop every expired row and return how many were removed."""
        now = self._clock()
        stale = [key for key, row in self._rows.items() if row.expired(now)]
        for key in stale:
            del self._rows[key]
        return len(stale)

    def entries(self) -> Iterator[tuple[str, V, float]]:
        """Yield live rows as `(key, value, expires_at_s)`, least recent first."""
        now = self._clock()
        for key, row in list(self._rows.items()):
            if not row.expired(now):
                yield key, row.value, row.expires_at_s
