"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/debounce.py.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger("taskkit.ai.debounce")


class Debouncer:
    """
    Run one async action after `delay_s` of quiet.

    Every `schedule()` call replaces the pending timer. The action itself runs
    as a task so the timer callback never blocks the loop.
    """

    def __init__(self, action: Callable[[], Awaitable[object]], *, delay_s: float) -> None:
        self._action = action
        self._delay_s = delay_s
        self._timer: asyncio.TimerHandle | None = None
        self._running: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def schedule(self) -> None:
        loop = asyncio.get_running_loop()
        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(self._delay_s, self._fire)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def flush(self) -> None:
        """Run the pending action now and wait for any in-progress run."""
        was_pending = self._timer is not None
        self.cancel()
        if self._running is not None and not self._running.done():
            await self._running
        if was_pending:
            await self._action()

    def _fire(self) -> None:
        self._timer = None
        self._running = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        try:
            await self._action()
        except Exception:
            logger.exception("Debounced action failed")
