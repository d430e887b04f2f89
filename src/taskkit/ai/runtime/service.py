"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/service.py.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import Any

from ..cache.lru import BoundedTTLCache
from ..storage.base import KeyValueStore
from ..types import CacheFamily, FamilyName, JSONValue
from .circuit_breaker import CooldownController
from .coalescing import RequestCoalescer
from .contracts import CooldownPolicy, PersistencePolicy, ThrottlePolicy
from .persistence import PersistenceBridge
from .rate_limit import CallRateWindow
from .scope import ScopeDeriver


class CacheService:
    """
    Owns all mutable AI access state for one process.

    Holds the per-family caches and in-flight maps, the quota cooldown, the
    refinement call window, the scope deriver and the persistence bridge.
    Construct one per process (or per test) and pass it to the client.
    """

    def __init__(
        self,
        *,
        families: Mapping[FamilyName, CacheFamily],
        store: KeyValueStore,
        cooldown_policy: CooldownPolicy | None = None,
        throttle_policy: ThrottlePolicy | None = None,
        persistence_policy: PersistencePolicy | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.families = dict(families)
        self.clock = clock
        self.caches: dict[FamilyName, BoundedTTLCache[Any]] = {
            name: BoundedTTLCache(family.capacity, clock=clock)
            for name, family in self.families.items()
        }
        self.in_flight: dict[FamilyName, RequestCoalescer[Any]] = {
            name: RequestCoalescer() for name in self.families
        }
        self.breaker = CooldownController(cooldown_policy, clock=clock)
        self.refine_window = CallRateWindow(throttle_policy, clock=clock)
        self.scopes = ScopeDeriver()
        self.persistence = PersistenceBridge(
            store=store,
            caches=self.caches,
            families=self.families,
            breaker=self.breaker,
            policy=persistence_policy,
            clock=clock,
        )

    def family(self, name: FamilyName) -> CacheFamily:
        return self.families[name]

    def cache(self, name: FamilyName) -> BoundedTTLCache[Any]:
        return self.caches[name]

    def coalescer(self, name: FamilyName) -> RequestCoalescer[Any]:
        return self.in_flight[name]

    async def clear(self) -> None:
        """Drop every cached entry in memory and in storage."""
        for cache in self.caches.values():
            cache.clear()
        await self.persistence.clear()

    def stats(self) -> dict[str, JSONValue]:
        return {
            "cache_sizes": {name: len(cache) for name, cache in self.caches.items()},
            "in_flight": {name: len(c) for name, c in self.in_flight.items()},
            "cooldown_remaining_s": self.breaker.remaining_s(),
            "refine_window": len(self.refine_window),
        }
