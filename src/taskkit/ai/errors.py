"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error taxonomy raised by the AI access layer.
"""

from __future__ import annotations

import time
from typing import Literal

FailureKind = Literal["quota", "rate_limit", "auth", "cooldown", "unclassified"]


class TaskAIError(Exception):
    """Base error for classified AI access failures."""

    kind: FailureKind = "unclassified"


class QuotaExhaustedError(TaskAIError):
    """Raised when the remote model reports hard quota/resource exhaustion."""

    kind: FailureKind = "quota"


class RateLimitedError(TaskAIError):
    """Raised when transient rate limiting outlasts the retry budget."""

    kind: FailureKind = "rate_limit"


class AuthError(TaskAIError):
    """Raised when the active credential is rejected by the remote model."""

    kind: FailureKind = "auth"


class CooldownActiveError(TaskAIError):
    """Raised without a remote call while the quota cooldown is active."""

    kind: FailureKind = "cooldown"

    def __init__(self, cooldown_until_s: float, *, now_s: float | None = None) -> None:
        self.cooldown_until_s = cooldown_until_s
        minutes = max(1, int(round(self.remaining_s(now_s) / 60.0)))
        super().__init__(f"AI cooldown active, try again in {minutes} minute(s)")

    def remaining_s(self, now_s: float | None = None) -> float:
        """Seconds left until calls are allowed again."""
        current = time.time() if now_s is None else now_s
        return max(0.0, self.cooldown_until_s - current)


class InvalidResponseError(TaskAIError):
    """Raised when the remote model returns text that does not match the schema."""


class StorageError(RuntimeError):
    """Raised by key-value storage backends on read/write failure."""
