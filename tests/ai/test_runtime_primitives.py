from __future__ import annotations

import asyncio

import pytest

from taskkit.ai import CallRateWindow, CooldownActiveError, CooldownController, CooldownPolicy, ThrottlePolicy
from taskkit.ai.runtime import Debouncer
from taskkit.ai.utils import backoff_delay, normalize_text


def run_async(coro):
    return asyncio.run(coro)


def test_debouncer_runs_once_after_quiet_period():
    async def scenario() -> None:
        runs: list[int] = []

        async def action() -> None:
            runs.append(1)

        debouncer = Debouncer(action, delay_s=0.02)
        for _ in range(4):
            debouncer.schedule()
            await asyncio.sleep(0.005)
        assert debouncer.pending
        await asyncio.sleep(0.1)
        assert runs == [1]
        assert not debouncer.pending

    run_async(scenario())


def test_debouncer_cancel_and_flush():
    async def scenario() -> None:
        runs: list[int] = []

        async def action() -> None:
            runs.append(1)

        debouncer = Debouncer(action, delay_s=10)
        debouncer.schedule()
        debouncer.cancel()
        await debouncer.flush()
        assert runs == []

        debouncer.schedule()
        await debouncer.flush()
        assert runs == [1]
        assert not debouncer.pending

    run_async(scenario())


def test_cooldown_controller_expires_by_clock(clock):
    breaker = CooldownController(CooldownPolicy(cooldown_s=100), clock=clock)
    breaker.ensure_available()
    until = breaker.trip()

    assert until == clock() + 100
    with pytest.raises(CooldownActiveError) as info:
        breaker.ensure_available()
    assert info.value.cooldown_until_s == until
    assert "2 minute" in str(info.value)

    clock.advance(100)
    assert not breaker.active
    breaker.ensure_available()


def test_cooldown_restore_keeps_later_deadline(clock):
    breaker = CooldownController(clock=clock)
    breaker.restore(clock() + 10)
    breaker.restore(clock() + 5)
    assert breaker.remaining_s() == 10
    breaker.reset()
    assert not breaker.active


def test_call_rate_window_slides(clock):
    window = CallRateWindow(ThrottlePolicy(max_calls=2, window_s=60), clock=clock)
    assert window.try_acquire()
    clock.advance(30)
    assert window.try_acquire()
    assert not window.try_acquire()

    clock.advance(31)
    assert len(window) == 1
    assert window.try_acquire()
    assert not window.try_acquire()


def test_backoff_delay_jitter_bounds():
    assert backoff_delay(1, 1.0, rand=0.0) == pytest.approx(1.6)
    assert backoff_delay(2, 1.0, rand=0.5) == pytest.approx(4.0)
    assert backoff_delay(3, 1.0, rand=1.0) == pytest.approx(9.6)


def test_normalize_text():
    assert normalize_text("  Grocery \t Trip\n ") == "grocery trip"
