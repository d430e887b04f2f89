"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

LiteLLM-backed generation transport.
"""

from __future__ import annotations

from typing import Any

from ..types import JSONSchema
from .contracts import GenerationTransport


class LiteLLMTransport(GenerationTransport):
    """Concrete transport using `litellm.acompletion`."""

    provider_id = "litellm"

    def __init__(self, api_key: str, *, api_base: str | None = None) -> None:
        self._api_key = api_key
        self._api_base = api_base

    @classmethod
    def create(cls, api_key: str) -> "LiteLLMTransport":
        """Transport factory matching `TransportFactory`."""
        return cls(api_key=api_key)

    async def generate(
        self,
        *,
        model: str,
        prompt: str,
        response_schema: JSONSchema | None = None,
    ) -> str:
        import litellm

        payload: dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self._api_key:
            payload["api_key"] = self._api_key
        if self._api_base:
            payload["api_base"] = self._api_base
        if response_schema is not None:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": "taskkit_response",
                    "schema": response_schema,
                },
            }

        response = await litellm.acompletion(**payload)
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        content = choices[0].message.content
        return content if isinstance(content, str) else ""
