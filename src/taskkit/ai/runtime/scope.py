"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/scope.py.
"""

from __future__ import annotations

import hashlib

from ..utils import fnv1a_32

NO_CREDENTIAL_SCOPE = "nokey"
LEGACY_SCOPE = "legacy"


class ScopeDeriver:
    """
    Map a credential to a short, stable cache partition tag.

    The tag is a truncated digest so cache keys written to storage or logs
    never carry credential bytes. Results are memoized for the process
    lifetime.
    """

    def __init__(self, *, algorithm: str = "sha256", length: int = 8) -> None:
        self._algorithm = algorithm
        self._length = length
        self._memo: dict[str, str] = {}

    def scope(self, credential: str | None) -> str:
        value = (credential or "").strip()
        if not value:
            return NO_CREDENTIAL_SCOPE
        cached = self._memo.get(value)
        if cached is not None:
            return cached
        tag = self._digest(value.encode("utf-8"))
        self._memo[value] = tag
        return tag

    def _digest(self, data: bytes) -> str:
        try:
            digest = hashlib.new(self._algorithm, data).hexdigest()
        except ValueError:
            # Digest unavailable in restricted builds.
            digest = f"{fnv1a_32(data):08x}"
        return digest[: self._length]


def cache_key(scope: str, family: str, normalized: str) -> str:
    return f"{scope}:{family}:{normalized}"
