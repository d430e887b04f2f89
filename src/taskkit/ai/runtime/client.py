"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/client.py.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from .. import prompts
from ..credentials import CredentialResolver
from ..types import FamilyName, JSONSchema, JSONValue, TaskMetadata, TemplateDraft
from ..utils import normalize_text
from .retry import RetryController
from .scope import cache_key
from .service import CacheService

T = TypeVar("T")

logger = logging.getLogger("taskkit.ai.client")


class TaskAIClient:
    """
    Call orchestrator for the four AI operations.

    Each call: cache lookup under the credential scope, then a coalesced remote
    call under the retry controller; the result is cached and a snapshot write
    is scheduled from inside the shared call so abandoned callers still warm
    the cache. Failures are never cached.
    """

    def __init__(
        self,
        *,
        service: CacheService,
        retry: RetryController,
        credentials: CredentialResolver,
        model: str,
    ) -> None:
        self.service = service
        self._retry = retry
        self._credentials = credentials
        self.model = model

    async def _execute(
        self,
        family_name: FamilyName,
        normalized: str,
        *,
        prompt: str,
        schema: JSONSchema | None,
        parse: Callable[[str], T],
        throttled: bool = False,
    ) -> T | None:
        """Run one operation; returns None only when the throttle refuses it."""
        await self.service.persistence.ensure_loaded()

        credential = await self._credentials.resolve()
        key = cache_key(self.service.scopes.scope(credential), family_name, normalized)
        family = self.service.family(family_name)
        cache = self.service.cache(family_name)

        cached = cache.get(key)
        if cached is not None:
            return cached

        coalescer = self.service.coalescer(family_name)
        if (
            throttled
            and not coalescer.in_flight(key)
            and not self.service.refine_window.try_acquire()
        ):
            logger.info("Skipping %s call, per-minute cap reached", family_name)
            return None

        async def _produce() -> T:
            used, raw = await self._retry.call_with_credential(
                lambda transport: transport.generate(
                    model=self.model,
                    prompt=prompt,
                    response_schema=schema,
                )
            )
            value = parse(raw)
            # the credential may have changed during backoff
            used_key = cache_key(
                self.service.scopes.scope(used), family_name, normalized
            )
            cache.set(used_key, value, ttl_s=family.ttl_s)
            self.service.persistence.schedule()
            return value

        return await coalescer.run(key, _produce)

    async def motivation(self, pending_count: int) -> str:
        """Short encouraging sentence for the current pending-task count."""
        count = max(0, int(pending_count))
        result = await self._execute(
            "motivation",
            str(count),
            prompt=prompts.motivation_prompt(count),
            schema=None,
            parse=prompts.parse_motivation,
        )
        return result if result is not None else prompts.DEFAULT_MOTIVATION

    async def refine(self, text: str) -> TaskMetadata:
        """
        Category, tags and urgency for one task.

        Best-effort: over the per-minute cap this returns inert default
        metadata without calling out or touching the cache.
        """
        result = await self._execute(
            "refine",
            normalize_text(text),
            prompt=prompts.refine_prompt(text.strip()),
            schema=prompts.REFINE_SCHEMA,
            parse=prompts.parse_refine,
            throttled=True,
        )
        return result if result is not None else TaskMetadata.default()

    async def template(self, prompt: str) -> TemplateDraft:
        """Reusable todo template for a free-text prompt."""
        result = await self._execute(
            "template",
            normalize_text(prompt),
            prompt=prompts.template_prompt(prompt.strip()),
            schema=prompts.TEMPLATE_SCHEMA,
            parse=prompts.parse_template,
        )
        return result if result is not None else TemplateDraft()

    async def breakdown(self, text: str) -> list[str]:
        """Three to five actionable sub-tasks for one task."""
        result = await self._execute(
            "breakdown",
            normalize_text(text),
            prompt=prompts.breakdown_prompt(text.strip()),
            schema=prompts.BREAKDOWN_SCHEMA,
            parse=prompts.parse_breakdown,
        )
        return list(result or [])

    def cooldown_remaining_s(self) -> float:
        return self.service.breaker.remaining_s()

    async def clear_cache(self) -> None:
        await self.service.clear()

    def stats(self) -> dict[str, JSONValue]:
        return self.service.stats()

    async def aclose(self) -> None:
        """Flush any pending snapshot write."""
        await self.service.persistence.aclose()

    async def __aenter__(self) -> "TaskAIClient":
        await self.service.persistence.ensure_loaded()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
