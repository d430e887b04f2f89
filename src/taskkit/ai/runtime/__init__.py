"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .circuit_breaker import CooldownController
from .client import TaskAIClient
from .coalescing import RequestCoalescer
from .contracts import (
    CooldownPolicy,
    PersistencePolicy,
    RetryPolicy,
    ThrottlePolicy,
)
from .debounce import Debouncer
from .persistence import SNAPSHOT_VERSION, PersistenceBridge, migrate_snapshot
from .rate_limit import CallRateWindow
from .retry import RetryController, classify_failure
from .scope import LEGACY_SCOPE, NO_CREDENTIAL_SCOPE, ScopeDeriver, cache_key
from .service import CacheService

__all__ = [
    "TaskAIClient",
    "CacheService",
    "CooldownController",
    "RequestCoalescer",
    "Debouncer",
    "PersistenceBridge",
    "CallRateWindow",
    "RetryController",
    "ScopeDeriver",
    "RetryPolicy",
    "CooldownPolicy",
    "ThrottlePolicy",
    "PersistencePolicy",
    "SNAPSHOT_VERSION",
    "LEGACY_SCOPE",
    "NO_CREDENTIAL_SCOPE",
    "cache_key",
    "classify_failure",
    "migrate_snapshot",
]
