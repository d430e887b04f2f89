"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed runtime policies for AI call execution.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry semantics for transient rate limiting."""

    max_retries: int = 2
    backoff_base_s: float = 1.0


@dataclass(frozen=True, slots=True)
class CooldownPolicy:
    """How long remote calls stay suppressed after quota exhaustion."""

    cooldown_s: float = 30 * 60.0


@dataclass(frozen=True, slots=True)
class ThrottlePolicy:
    """Sliding-window cap for best-effort refinement calls."""

    max_calls: int = 5
    window_s: float = 60.0


@dataclass(frozen=True, slots=True)
class PersistencePolicy:
    """Snapshot storage keys and write debounce."""

    debounce_s: float = 0.75
    cache_key: str = "taskkit_ai_cache_v2"
    legacy_cache_key: str = "taskkit_ai_cache_v1"
    cooldown_key: str = "taskkit_ai_cooldown_until"
