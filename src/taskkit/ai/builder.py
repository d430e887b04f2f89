"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: builder.py.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any

from .cache.families import build_families
from .credentials import CredentialResolver, CredentialStore
from .profiles import PROFILES
from .providers.contracts import TransportFactory
from .providers.litellm import LiteLLMTransport
from .runtime.client import TaskAIClient
from .runtime.contracts import (
    CooldownPolicy,
    PersistencePolicy,
    RetryPolicy,
    ThrottlePolicy,
)
from .runtime.retry import RetryController
from .runtime.service import CacheService
from .settings import AISettings, env_credential
from .storage.base import KeyValueStore
from .storage.factory import create_store


class TaskAIBuilder:
    """Builder-first DX for wiring a `TaskAIClient` with its collaborators."""

    def __init__(self) -> None:
        self._settings = AISettings.from_env()
        self._store: KeyValueStore | None = None
        self._credential_store: CredentialStore | None = None
        self._credential_fallback: Callable[[], str] = env_credential
        self._transport_factory: TransportFactory = LiteLLMTransport.create
        self._redis_client: Any | None = None
        self._clock: Callable[[], float] = time.time
        self._sleep: Callable[[float], Awaitable[None]] | None = None

        self._retry_policy: RetryPolicy | None = None
        self._cooldown_policy: CooldownPolicy | None = None
        self._throttle_policy: ThrottlePolicy | None = None
        self._persistence_policy: PersistencePolicy | None = None

    def settings(self, settings: AISettings) -> "TaskAIBuilder":
        """Replace builder settings with an explicit `AISettings` instance."""
        self._settings = settings
        return self

    def model(self, model: str) -> "TaskAIBuilder":
        """Override the model identifier in builder settings."""
        self._settings = replace(self._settings, model=model)
        return self

    def profile(self, name: str) -> "TaskAIBuilder":
        """Apply one named runtime profile from `taskkit.ai.profiles.PROFILES`."""
        key = name.strip().lower()
        row = PROFILES.get(key)
        if row is None:
            raise ValueError(f"Unknown ai profile '{name}'")
        self._retry_policy = row["retry"]
        self._cooldown_policy = row["cooldown"]
        self._throttle_policy = row["throttle"]
        self._persistence_policy = row["persistence"]
        return self

    def with_store(self, store: KeyValueStore) -> "TaskAIBuilder":
        """Use one durable store for snapshots, cooldown and credentials."""
        self._store = store
        return self

    def with_redis(self, redis_client: Any) -> "TaskAIBuilder":
        """Inject a `redis.asyncio` client for the redis storage backend."""
        self._redis_client = redis_client
        return self

    def with_credential_store(self, credential_store: CredentialStore) -> "TaskAIBuilder":
        self._credential_store = credential_store
        return self

    def with_credential_fallback(self, fallback: Callable[[], str]) -> "TaskAIBuilder":
        """Replace the environment fallback used when no key is stored."""
        self._credential_fallback = fallback
        return self

    def with_transport_factory(self, factory: TransportFactory) -> "TaskAIBuilder":
        """Select how a remote transport is built for one credential."""
        self._transport_factory = factory
        return self

    def with_clock(self, clock: Callable[[], float]) -> "TaskAIBuilder":
        self._clock = clock
        return self

    def with_sleep(self, sleep: Callable[[float], Awaitable[None]]) -> "TaskAIBuilder":
        self._sleep = sleep
        return self

    def build(self) -> TaskAIClient:
        """Materialize one configured `TaskAIClient` instance."""
        settings = self._settings
        store = self._store or create_store(settings, redis_client=self._redis_client)
        credential_store = self._credential_store or CredentialStore(
            store, key=settings.credential_storage_key
        )
        credentials = CredentialResolver(
            credential_store, fallback=self._credential_fallback
        )

        persistence_policy = replace(
            self._persistence_policy
            or PersistencePolicy(debounce_s=settings.persist_debounce_s),
            cache_key=settings.cache_storage_key,
            legacy_cache_key=settings.legacy_cache_storage_key,
            cooldown_key=settings.cooldown_storage_key,
        )
        service = CacheService(
            families=build_families(settings),
            store=store,
            cooldown_policy=self._cooldown_policy
            or CooldownPolicy(cooldown_s=settings.cooldown_s),
            throttle_policy=self._throttle_policy
            or ThrottlePolicy(
                max_calls=settings.refine_max_calls,
                window_s=settings.refine_window_s,
            ),
            persistence_policy=persistence_policy,
            clock=self._clock,
        )

        retry_kwargs: dict[str, Any] = {}
        if self._sleep is not None:
            retry_kwargs["sleep"] = self._sleep
        retry = RetryController(
            credentials=credentials,
            breaker=service.breaker,
            transport_factory=self._transport_factory,
            policy=self._retry_policy
            or RetryPolicy(
                max_retries=settings.max_retries,
                backoff_base_s=settings.backoff_base_s,
            ),
            on_quota=service.persistence.save_cooldown,
            **retry_kwargs,
        )
        return TaskAIClient(
            service=service,
            retry=retry,
            credentials=credentials,
            model=settings.model,
        )


def create_task_ai(settings: AISettings | None = None, **kwargs: Any) -> TaskAIClient:
    """
    Create a `TaskAIClient` from settings.

    Keyword arguments map onto builder hooks: `store`, `transport_factory`,
    `credential_fallback`, `clock`, `sleep`, `profile`.
    """
    builder = TaskAIBuilder()
    if settings is not None:
        builder.settings(settings)
    if "profile" in kwargs:
        builder.profile(kwargs.pop("profile"))
    hooks = {
        "store": builder.with_store,
        "transport_factory": builder.with_transport_factory,
        "credential_fallback": builder.with_credential_fallback,
        "clock": builder.with_clock,
        "sleep": builder.with_sleep,
        "redis_client": builder.with_redis,
    }
    for name, value in kwargs.items():
        hook = hooks.get(name)
        if hook is None:
            raise TypeError(f"Unknown create_task_ai option '{name}'")
        hook(value)
    return builder.build()
