"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Persistence bridge between the in-memory AI caches and durable storage.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from ..cache.lru import BoundedTTLCache
from ..storage.base import KeyValueStore
from ..types import CacheFamily, FamilyName
from .circuit_breaker import CooldownController
from .contracts import PersistencePolicy
from .debounce import Debouncer
from .scope import LEGACY_SCOPE

logger = logging.getLogger("taskkit.ai.persistence")

SNAPSHOT_VERSION = 2

Snapshot = dict[str, Any]


def _migrate_v1(data: Snapshot) -> Snapshot:
    """
    Version 1 stored un-scoped `family:input` keys as
    `{"caches": {family: {key: {"value": ..., "expiresAt": ms}}}}`.
    """
    families: dict[str, list[list[Any]]] = {}
    caches = data.get("caches")
    if not isinstance(caches, dict):
        caches = {}
    for family, rows in caches.items():
        if not isinstance(rows, dict):
            continue
        migrated: list[list[Any]] = []
        for key, row in rows.items():
            if not isinstance(row, dict) or "value" not in row:
                continue
            expires_ms = row.get("expiresAt")
            if not isinstance(expires_ms, (int, float)):
                continue
            suffix = key if key.startswith(f"{family}:") else f"{family}:{key}"
            migrated.append([f"{LEGACY_SCOPE}:{suffix}", row["value"], expires_ms / 1000.0])
        families[str(family)] = migrated
    return {"version": 2, "saved_at": data.get("saved_at"), "families": families}


# version -> migration producing version + 1
MIGRATIONS: dict[int, Callable[[Snapshot], Snapshot]] = {
    1: _migrate_v1,
}


def migrate_snapshot(data: Snapshot) -> Snapshot | None:
    """Apply sequential migrations up to `SNAPSHOT_VERSION`, or None if unusable."""
    version = data.get("version")
    if not isinstance(version, int):
        return None
    while version < SNAPSHOT_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            return None
        data = step(data)
        version = data.get("version")
        if not isinstance(version, int):
            return None
    if version != SNAPSHOT_VERSION:
        return None
    return data


class PersistenceBridge:
    """
    Debounced snapshot writer and one-shot loader for the AI caches.

    Storage failures are logged and swallowed: the in-memory caches keep
    working without durability.
    """

    def __init__(
        self,
        *,
        store: KeyValueStore,
        caches: Mapping[FamilyName, BoundedTTLCache[Any]],
        families: Mapping[FamilyName, CacheFamily],
        breaker: CooldownController,
        policy: PersistencePolicy | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._caches = caches
        self._families = families
        self._breaker = breaker
        self.policy = policy or PersistencePolicy()
        self._clock = clock
        self._dirty = False
        self._load_task: asyncio.Task[None] | None = None
        self._debouncer = Debouncer(self._write, delay_s=self.policy.debounce_s)

    @property
    def loaded(self) -> bool:
        return self._load_task is not None and self._load_task.done()

    @property
    def dirty(self) -> bool:
        return self._dirty

    def schedule(self) -> None:
        """Mark caches dirty and (re)arm the debounced snapshot write."""
        self._dirty = True
        self._debouncer.schedule()

    async def flush(self) -> None:
        await self._debouncer.flush()

    async def aclose(self) -> None:
        await self.flush()

    async def ensure_loaded(self) -> None:
        """Run `load()` once per bridge; concurrent callers await the same load."""
        if self._load_task is None:
            self._load_task = asyncio.ensure_future(self.load())
        await asyncio.shield(self._load_task)

    def snapshot(self) -> Snapshot:
        families: dict[str, list[list[Any]]] = {}
        for name, cache in self._caches.items():
            family = self._families[name]
            families[name] = [
                [key, family.dump(value), expires_at_s]
                for key, value, expires_at_s in cache.entries()
            ]
        return {
            "version": SNAPSHOT_VERSION,
            "saved_at": self._clock(),
            "families": families,
        }

    async def _write(self) -> bool:
        """Persist a dirty snapshot; returns False only when the write failed."""
        if not self._dirty:
            return True
        self._dirty = False
        try:
            blob = json.dumps(self.snapshot(), ensure_ascii=True)
            await self._store.set(self.policy.cache_key, blob)
        except Exception:
            logger.exception("Failed to persist AI cache snapshot")
            return False
        return True

    async def _read_snapshot(self) -> tuple[Snapshot | None, bool]:
        """Return the stored snapshot and whether it came from the legacy key."""
        blob = await self._store.get(self.policy.cache_key)
        from_legacy = False
        if blob is None and self.policy.legacy_cache_key:
            blob = await self._store.get(self.policy.legacy_cache_key)
            from_legacy = blob is not None
        if blob is None:
            return None, False
        data = json.loads(blob)
        if not isinstance(data, dict):
            raise ValueError("AI cache snapshot is not a JSON object")
        return data, from_legacy

    async def load(self) -> None:
        await self._load_cooldown()
        try:
            data, from_legacy = await self._read_snapshot()
        except Exception:
            logger.exception("Failed to read AI cache snapshot")
            return
        if data is None:
            return

        original_version = data.get("version")
        try:
            migrated = migrate_snapshot(data)
            if migrated is None:
                logger.warning(
                    "Discarding AI cache snapshot with unsupported version %r",
                    original_version,
                )
                return
            restored = self._restore(migrated)
        except Exception:
            logger.exception("Failed to restore AI cache snapshot")
            return
        logger.info("Restored %d AI cache entries from storage", restored)

        if from_legacy or original_version != SNAPSHOT_VERSION:
            self._dirty = True
            written = await self._write()
            if from_legacy and not written:
                logger.warning("Keeping legacy AI cache snapshot until it is rewritten")
            elif from_legacy:
                try:
                    await self._store.delete(self.policy.legacy_cache_key)
                except Exception:
                    logger.exception("Failed to discard legacy AI cache snapshot")

    def _restore(self, data: Snapshot) -> int:
        families = data.get("families")
        if not isinstance(families, dict):
            return 0
        now = self._clock()
        restored = 0
        for name, rows in families.items():
            cache = self._caches.get(name)
            family = self._families.get(name)
            if cache is None or family is None or not isinstance(rows, list):
                continue
            live: list[tuple[str, Any, float]] = []
            for row in rows:
                if not isinstance(row, list) or len(row) != 3:
                    continue
                key, raw, expires_at_s = row
                if not isinstance(key, str) or not isinstance(expires_at_s, (int, float)):
                    continue
                if now > expires_at_s:
                    continue
                try:
                    live.append((key, family.load(raw), float(expires_at_s)))
                except Exception:
                    logger.warning("Dropping malformed %s cache entry %s", name, key)
            for key, value, expires_at_s in live:
                cache.restore(key, value, expires_at_s)
            restored += len(cache)
        return restored

    async def _load_cooldown(self) -> None:
        try:
            raw = await self._store.get(self.policy.cooldown_key)
            if raw:
                self._breaker.restore(float(raw))
        except Exception:
            logger.exception("Failed to read AI cooldown state")

    async def save_cooldown(self, cooldown_until_s: float) -> None:
        try:
            await self._store.set(self.policy.cooldown_key, repr(float(cooldown_until_s)))
        except Exception:
            logger.exception("Failed to persist AI cooldown state")

    async def clear(self) -> None:
        self._debouncer.cancel()
        self._dirty = False
        try:
            await self._store.delete(self.policy.cache_key)
        except Exception:
            logger.exception("Failed to clear AI cache snapshot")
