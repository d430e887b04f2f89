from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from taskkit.ai import (
    AISettings,
    InMemoryKeyValueStore,
    TaskAIBuilder,
    TaskAIClient,
)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAPIError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class FakeRemote:
    """Scripted remote endpoint; `factory` is a `TransportFactory`."""

    default: Any = "ok"
    responses: deque = field(default_factory=deque)
    calls: list[dict[str, Any]] = field(default_factory=list)
    gate: asyncio.Event | None = None

    def queue(self, *items: Any) -> None:
        self.responses.extend(items)

    def factory(self, credential: str) -> "_FakeTransport":
        return _FakeTransport(self, credential)


class _FakeTransport:
    provider_id = "fake"

    def __init__(self, remote: FakeRemote, credential: str) -> None:
        self._remote = remote
        self._credential = credential

    async def generate(self, *, model, prompt, response_schema=None):
        self._remote.calls.append(
            {
                "credential": self._credential,
                "model": model,
                "prompt": prompt,
                "schema": response_schema,
            }
        )
        if self._remote.gate is not None:
            await self._remote.gate.wait()
        item = (
            self._remote.responses.popleft()
            if self._remote.responses
            else self._remote.default
        )
        if isinstance(item, BaseException):
            raise item
        if callable(item):
            return item(prompt)
        return item


class RecordingStore(InMemoryKeyValueStore):
    """In-memory store that counts writes and can be told to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.reads: list[str] = []
        self.writes: list[str] = []
        self.fail_reads = False
        self.fail_writes = False

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise OSError("disk unavailable")
        self.reads.append(key)
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes.append(key)
        await super().set(key, value)


class Credential:
    def __init__(self, value: str = "key-a") -> None:
        self.value = value

    def __call__(self) -> str:
        return self.value


@dataclass
class Harness:
    remote: FakeRemote
    store: RecordingStore
    clock: FakeClock
    credential: Credential
    sleeps: list[float]

    def build(self, **overrides: Any) -> TaskAIClient:
        settings = AISettings(persist_debounce_s=0.01, **overrides)

        async def _sleep(delay: float) -> None:
            self.sleeps.append(delay)

        return (
            TaskAIBuilder()
            .settings(settings)
            .with_store(self.store)
            .with_transport_factory(self.remote.factory)
            .with_credential_fallback(self.credential)
            .with_clock(self.clock)
            .with_sleep(_sleep)
            .build()
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def harness(clock: FakeClock) -> Harness:
    return Harness(
        remote=FakeRemote(),
        store=RecordingStore(),
        clock=clock,
        credential=Credential(),
        sleeps=[],
    )


@pytest.fixture
def api_error() -> Callable[..., FakeAPIError]:
    return FakeAPIError


