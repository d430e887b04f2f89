"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: storage/memory.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .base import KeyValueStore


@dataclass(slots=True)
class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store suitable for development/test workloads."""

    backend_id: str = "memory"
    rows: dict[str, str] = field(default_factory=dict)

    async def get(self, key: str) -> str | None:
        return self.rows.get(key)

    async def set(self, key: str, value: str) -> None:
        self.rows[key] = value

    async def delete(self, key: str) -> None:
        self.rows.pop(key, None)
