"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

AI access settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_first(*names: str, default: str | None = None) -> str | None:
    """
    Return the first non-empty environment variable in `names`.

    Args:
        *names: Environment variable names to check in order.
        default: Value returned if no non-empty variable is found.
    """
    for name in names:
        raw = os.getenv(name)
        if raw is None:
            continue
        value = raw.strip()
        if value:
            return value
    return default


@dataclass(frozen=True, slots=True)
class AISettings:
    """Explicit settings used by the AI cache, runtime and transports."""

    model: str = "gemini/gemini-3-flash-preview"

    max_retries: int = 2
    backoff_base_s: float = 1.0
    cooldown_s: float = 30 * 60.0

    refine_max_calls: int = 5
    refine_window_s: float = 60.0

    persist_debounce_s: float = 0.75

    motivation_ttl_s: float = 3 * 60.0
    motivation_capacity: int = 50
    refine_ttl_s: float = 30 * 24 * 3600.0
    refine_capacity: int = 300
    template_ttl_s: float = 24 * 3600.0
    template_capacity: int = 100
    breakdown_ttl_s: float = 30 * 24 * 3600.0
    breakdown_capacity: int = 200

    storage_backend: str = "memory"
    storage_path: str = "~/.taskkit/ai_store.json"
    redis_url: str | None = None
    redis_prefix: str = "taskkit"

    cache_storage_key: str = "taskkit_ai_cache_v2"
    legacy_cache_storage_key: str = "taskkit_ai_cache_v1"
    cooldown_storage_key: str = "taskkit_ai_cooldown_until"
    credential_storage_key: str = "taskkit_ai_api_key"

    @staticmethod
    def from_env() -> "AISettings":
        """Load settings from environment variables."""
        return AISettings(
            model=os.getenv("TASKKIT_AI_MODEL", "gemini/gemini-3-flash-preview"),
            max_retries=int(os.getenv("TASKKIT_AI_MAX_RETRIES", "2")),
            backoff_base_s=float(os.getenv("TASKKIT_AI_BACKOFF_BASE_S", "1.0")),
            cooldown_s=float(os.getenv("TASKKIT_AI_COOLDOWN_S", "1800")),
            refine_max_calls=int(os.getenv("TASKKIT_AI_REFINE_MAX_CALLS", "5")),
            refine_window_s=float(os.getenv("TASKKIT_AI_REFINE_WINDOW_S", "60")),
            persist_debounce_s=float(
                os.getenv("TASKKIT_AI_PERSIST_DEBOUNCE_S", "0.75")
            ),
            motivation_ttl_s=float(os.getenv("TASKKIT_AI_MOTIVATION_TTL_S", "180")),
            motivation_capacity=int(
                os.getenv("TASKKIT_AI_MOTIVATION_CAPACITY", "50")
            ),
            refine_ttl_s=float(os.getenv("TASKKIT_AI_REFINE_TTL_S", "2592000")),
            refine_capacity=int(os.getenv("TASKKIT_AI_REFINE_CAPACITY", "300")),
            template_ttl_s=float(os.getenv("TASKKIT_AI_TEMPLATE_TTL_S", "86400")),
            template_capacity=int(os.getenv("TASKKIT_AI_TEMPLATE_CAPACITY", "100")),
            breakdown_ttl_s=float(
                os.getenv("TASKKIT_AI_BREAKDOWN_TTL_S", "2592000")
            ),
            breakdown_capacity=int(
                os.getenv("TASKKIT_AI_BREAKDOWN_CAPACITY", "200")
            ),
            storage_backend=(
                _env_first("TASKKIT_AI_STORAGE_BACKEND", default="memory") or "memory"
            ).lower(),
            storage_path=_env_first(
                "TASKKIT_AI_STORAGE_PATH", default="~/.taskkit/ai_store.json"
            )
            or "~/.taskkit/ai_store.json",
            redis_url=_env_first("TASKKIT_AI_REDIS_URL", "TASKKIT_REDIS_URL"),
            redis_prefix=_env_first("TASKKIT_AI_REDIS_PREFIX", default="taskkit")
            or "taskkit",
        )


def env_credential() -> str:
    """Return the development fallback credential from the environment."""
    return _env_first("API_KEY", "GEMINI_API_KEY", default="") or ""
