"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory helpers for selecting storage backends from settings.
"""

from __future__ import annotations

from typing import Any

from ..settings import AISettings
from .base import KeyValueStore
from .file import JSONFileKeyValueStore
from .memory import InMemoryKeyValueStore


def create_store(settings: AISettings, *, redis_client: Any | None = None) -> KeyValueStore:
    """
    Create a key-value store from `settings.storage_backend`.

    Backends:
    - `memory` (default)
    - `file`
    - `redis`
    """
    backend = settings.storage_backend.strip().lower()

    if backend in ("mem", "memory", "inmemory", "in_memory"):
        return InMemoryKeyValueStore()

    if backend in ("file", "json"):
        return JSONFileKeyValueStore(settings.storage_path)

    if backend in ("redis",):
        from .redis import RedisKeyValueStore

        client = redis_client
        if client is None:
            if not settings.redis_url:
                raise ValueError("Redis storage backend requires TASKKIT_AI_REDIS_URL")
            try:
                import redis.asyncio as redis
            except ModuleNotFoundError as exc:  # pragma: no cover
                raise RuntimeError(
                    "Redis storage backend requires `redis` to be installed."
                ) from exc
            client = redis.from_url(settings.redis_url)
        return RedisKeyValueStore(client, prefix=settings.redis_prefix)

    raise ValueError(f"Unknown storage backend '{settings.storage_backend}'")
