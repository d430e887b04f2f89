"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Credential storage and resolution for remote AI calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .settings import env_credential
from .storage.base import KeyValueStore

logger = logging.getLogger("taskkit.ai.credentials")


class CredentialStore:
    """User-provided API key kept in durable key-value storage."""

    def __init__(self, store: KeyValueStore, *, key: str = "taskkit_ai_api_key") -> None:
        self._store = store
        self._key = key

    async def get(self) -> str:
        value = await self._store.get(self._key)
        return (value or "").strip()

    async def set(self, value: str) -> None:
        await self._store.set(self._key, value.strip())

    async def clear(self) -> None:
        await self._store.delete(self._key)


class CredentialResolver:
    """
    Resolve the active credential for one remote call.

    Precedence is the stored (user-provided) key, then the environment
    fallback. Resolution happens on every attempt so a key changed during
    backoff is honored.
    """

    def __init__(
        self,
        store: CredentialStore,
        *,
        fallback: Callable[[], str] = env_credential,
    ) -> None:
        self.store = store
        self._fallback = fallback

    async def resolve(self) -> str:
        try:
            stored = await self.store.get()
        except Exception:
            logger.exception("Failed to read stored AI credential, using fallback")
            stored = ""
        if stored:
            return stored
        return (self._fallback() or "").strip()

    async def invalidate(self) -> None:
        """Drop the stored credential after the remote side rejected it."""
        logger.warning("Clearing stored AI credential after authentication failure")
        try:
            await self.store.clear()
        except Exception:
            logger.exception("Failed to clear stored AI credential")
