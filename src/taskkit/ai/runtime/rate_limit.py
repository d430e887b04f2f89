"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/rate_limit.py.
"""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable

from .contracts import ThrottlePolicy


class CallRateWindow:
    """Sliding-window limiter that refuses instead of waiting."""

    def __init__(
        self,
        policy: ThrottlePolicy | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.policy = policy or ThrottlePolicy()
        self._clock = clock
        self._calls: deque[float] = deque(maxlen=max(1, self.policy.max_calls))

    def __len__(self) -> int:
        self._evict(self._clock())
        return len(self._calls)

    def _evict(self, now: float) -> None:
        horizon = now - self.policy.window_s
        while self._calls and self._calls[0] <= horizon:
            self._calls.popleft()

    def try_acquire(self) -> bool:
        """Record one call and return True when the window has room."""
        if self.policy.max_calls <= 0:
            return False
        now = self._clock()
        self._evict(now)
        if len(self._calls) >= self.policy.max_calls:
            return False
        self._calls.append(now)
        return True
