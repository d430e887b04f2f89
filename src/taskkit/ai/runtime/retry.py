"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/retry.py.
"""

from __future__ import annotations

import asyncio
import logging
import random
import re
from collections.abc import Awaitable, Callable
from typing import Literal, TypeVar

from ..credentials import CredentialResolver
from ..errors import AuthError, QuotaExhaustedError, RateLimitedError, TaskAIError
from ..providers.contracts import GenerationTransport, TransportFactory
from ..utils import backoff_delay
from .circuit_breaker import CooldownController
from .contracts import RetryPolicy

T = TypeVar("T")

FailureClass = Literal["quota", "rate_limit", "auth", "unclassified"]

logger = logging.getLogger("taskkit.ai.retry")

_QUOTA_PHRASES = ("RESOURCE_EXHAUSTED", "QUOTA", "BILLING")
_RATE_LIMIT_CODE = re.compile(r"\b429\b")
_RATE_LIMIT_PHRASES = ("RATE LIMIT", "RATE_LIMIT", "TOO MANY REQUESTS")
_AUTH_PHRASES = (
    "API_KEY_INVALID",
    "API KEY NOT VALID",
    "INVALID API KEY",
    "INVALID_API_KEY",
    "API KEY EXPIRED",
    "UNAUTHENTICATED",
    "PERMISSION_DENIED",
)


def _status_code(error: BaseException) -> int | None:
    for attr in ("status_code", "status", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    response = getattr(error, "response", None)
    value = getattr(response, "status_code", None)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def classify_failure(error: BaseException) -> FailureClass:
    """
    Classify one remote failure.

    Quota wording wins over a 429 status since real quota exhaustion is often
    reported with 429.
    """
    if isinstance(error, TaskAIError):
        if error.kind in ("quota", "rate_limit", "auth"):
            return error.kind
        return "unclassified"

    message = str(error).upper()
    status = _status_code(error)

    if any(token in message for token in _QUOTA_PHRASES):
        return "quota"
    if status == 429 or (
        _RATE_LIMIT_CODE.search(message) is not None
        or any(token in message for token in _RATE_LIMIT_PHRASES)
    ):
        return "rate_limit"
    if status in (401, 403) or any(token in message for token in _AUTH_PHRASES):
        return "auth"
    return "unclassified"


class RetryController:
    """
    Execute one remote attempt under the cooldown breaker and backoff policy.

    Every attempt re-resolves the credential, re-checks the breaker and builds
    a fresh transport for that credential.
    """

    def __init__(
        self,
        *,
        credentials: CredentialResolver,
        breaker: CooldownController,
        transport_factory: TransportFactory,
        policy: RetryPolicy | None = None,
        on_quota: Callable[[float], Awaitable[None]] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rand: Callable[[], float] = random.random,
    ) -> None:
        self._credentials = credentials
        self._breaker = breaker
        self._transport_factory = transport_factory
        self.policy = policy or RetryPolicy()
        self._on_quota = on_quota
        self._sleep = sleep
        self._rand = rand

    async def call(
        self,
        attempt: Callable[[GenerationTransport], Awaitable[T]],
        *,
        max_retries: int | None = None,
    ) -> T:
        _, value = await self.call_with_credential(attempt, max_retries=max_retries)
        return value

    async def call_with_credential(
        self,
        attempt: Callable[[GenerationTransport], Awaitable[T]],
        *,
        max_retries: int | None = None,
    ) -> tuple[str, T]:
        """Like `call`, also returning the credential the successful attempt used."""
        retries = self.policy.max_retries if max_retries is None else max_retries
        tries = 0
        while True:
            credential = await self._credentials.resolve()
            self._breaker.ensure_available()
            transport = self._transport_factory(credential)
            try:
                return credential, await attempt(transport)
            except Exception as error:
                kind = classify_failure(error)
                if kind == "quota":
                    until = self._breaker.trip()
                    if self._on_quota is not None:
                        await self._on_quota(until)
                    if isinstance(error, QuotaExhaustedError):
                        raise
                    raise QuotaExhaustedError(str(error)) from error

                if kind == "auth":
                    await self._credentials.invalidate()
                    if isinstance(error, AuthError):
                        raise
                    raise AuthError(str(error)) from error

                if kind == "rate_limit":
                    if tries < retries:
                        tries += 1
                        delay = backoff_delay(
                            tries, self.policy.backoff_base_s, rand=self._rand()
                        )
                        logger.warning(
                            "AI rate limit hit, retrying in %.2fs (attempt %d/%d)",
                            delay,
                            tries,
                            retries,
                        )
                        await self._sleep(delay)
                        continue
                    if isinstance(error, RateLimitedError):
                        raise
                    raise RateLimitedError(str(error)) from error

                raise
