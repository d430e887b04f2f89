"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/families.py.
"""

from __future__ import annotations

from pydantic import TypeAdapter

from ..settings import AISettings
from ..types import CacheFamily, FamilyName, TaskMetadata, TemplateDraft


def build_families(settings: AISettings) -> dict[FamilyName, CacheFamily]:
    """Resolve the four operation families from settings."""
    return {
        "motivation": CacheFamily(
            name="motivation",
            ttl_s=settings.motivation_ttl_s,
            capacity=settings.motivation_capacity,
            adapter=TypeAdapter(str),
        ),
        "refine": CacheFamily(
            name="refine",
            ttl_s=settings.refine_ttl_s,
            capacity=settings.refine_capacity,
            adapter=TypeAdapter(TaskMetadata),
        ),
        "template": CacheFamily(
            name="template",
            ttl_s=settings.template_ttl_s,
            capacity=settings.template_capacity,
            adapter=TypeAdapter(TemplateDraft),
        ),
        "breakdown": CacheFamily(
            name="breakdown",
            ttl_s=settings.breakdown_ttl_s,
            capacity=settings.breakdown_capacity,
            adapter=TypeAdapter(list[str]),
        ),
    }
