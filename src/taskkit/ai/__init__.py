"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: __init__.py.
"""

from __future__ import annotations

import logging

from .builder import TaskAIBuilder, create_task_ai
from .cache import BoundedTTLCache, CacheEntry, build_families
from .credentials import CredentialResolver, CredentialStore
from .errors import (
    AuthError,
    CooldownActiveError,
    InvalidResponseError,
    QuotaExhaustedError,
    RateLimitedError,
    StorageError,
    TaskAIError,
)
from .profiles import PROFILES
from .providers import GenerationTransport, LiteLLMTransport, TransportFactory
from .runtime import (
    CacheService,
    CallRateWindow,
    CooldownController,
    CooldownPolicy,
    PersistenceBridge,
    PersistencePolicy,
    RequestCoalescer,
    RetryController,
    RetryPolicy,
    ScopeDeriver,
    TaskAIClient,
    ThrottlePolicy,
    classify_failure,
)
from .settings import AISettings
from .storage import (
    InMemoryKeyValueStore,
    JSONFileKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
    create_store,
)
from .types import CacheFamily, TaskMetadata, TemplateDraft

logging.getLogger("taskkit.ai").addHandler(logging.NullHandler())

__all__ = [
    "TaskAIBuilder",
    "create_task_ai",
    "TaskAIClient",
    "AISettings",
    "PROFILES",
    "BoundedTTLCache",
    "CacheEntry",
    "CacheFamily",
    "build_families",
    "CacheService",
    "CallRateWindow",
    "CooldownController",
    "PersistenceBridge",
    "RequestCoalescer",
    "RetryController",
    "ScopeDeriver",
    "classify_failure",
    "RetryPolicy",
    "CooldownPolicy",
    "ThrottlePolicy",
    "PersistencePolicy",
    "CredentialStore",
    "CredentialResolver",
    "GenerationTransport",
    "TransportFactory",
    "LiteLLMTransport",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JSONFileKeyValueStore",
    "RedisKeyValueStore",
    "create_store",
    "TaskMetadata",
    "TemplateDraft",
    "TaskAIError",
    "QuotaExhaustedError",
    "RateLimitedError",
    "AuthError",
    "CooldownActiveError",
    "InvalidResponseError",
    "StorageError",
]
