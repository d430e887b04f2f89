"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[V]):
    """One cached AI result row with expiration metadata."""

    value: V
    expires_at_s: float

    def expired(self, now_s: float) -> bool:
        return now_s > self.expires_at_s
