"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/circuit_breaker.py.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..errors import CooldownActiveError
from .contracts import CooldownPolicy

logger = logging.getLogger("taskkit.ai.cooldown")


class CooldownController:
    """
    Quota circuit breaker shared by every operation family.

    Idle while `now >= cooldown_until_s`; there is no explicit close
    transition, expiry is checked on each call.
    """

    def __init__(
        self,
        policy: CooldownPolicy | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.policy = policy or CooldownPolicy()
        self._clock = clock
        self.cooldown_until_s = 0.0

    @property
    def active(self) -> bool:
        return self._clock() < self.cooldown_until_s

    def remaining_s(self) -> float:
        return max(0.0, self.cooldown_until_s - self._clock())

    def ensure_available(self) -> None:
        if self.active:
            raise CooldownActiveError(self.cooldown_until_s, now_s=self._clock())

    def trip(self) -> float:
        """Open the breaker for `policy.cooldown_s` from now and return its end."""
        self.cooldown_until_s = self._clock() + self.policy.cooldown_s
        logger.warning(
            "AI quota exhausted, suppressing remote calls for %.0fs",
            self.policy.cooldown_s,
        )
        return self.cooldown_until_s

    def restore(self, cooldown_until_s: float) -> None:
        """Adopt a persisted cooldown end, keeping whichever ends later."""
        self.cooldown_until_s = max(self.cooldown_until_s, cooldown_until_s)

    def reset(self) -> None:
        self.cooldown_until_s = 0.0
