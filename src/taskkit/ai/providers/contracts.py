"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: providers/contracts.py.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeAlias

from ..types import JSONSchema


class GenerationTransport(Protocol):
    """Remote generation endpoint bound to one credential."""

    provider_id: str

    async def generate(
        self,
        *,
        model: str,
        prompt: str,
        response_schema: JSONSchema | None = None,
    ) -> str:
        """Return raw model text (JSON text when a schema is supplied)."""
        ...


TransportFactory: TypeAlias = Callable[[str], GenerationTransport]
