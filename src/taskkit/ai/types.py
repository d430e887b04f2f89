"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

This module defines the result types returned by the AI operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]
JSONSchema: TypeAlias = dict[str, JSONValue]

Category = Literal["work", "personal", "health", "other"]
CATEGORIES: tuple[str, ...] = ("work", "personal", "health", "other")

FamilyName = Literal["motivation", "refine", "template", "breakdown"]
FAMILY_NAMES: tuple[FamilyName, ...] = ("motivation", "refine", "template", "breakdown")


def _coerce_category(value: Any) -> str:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in CATEGORIES:
            return lowered
    return "other"


class TaskMetadata(BaseModel):
    """Category, tags and urgency inferred for one task."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    category: Category = "other"
    tags: list[str] = Field(default_factory=list)
    is_urgent: bool = Field(default=False, alias="isUrgent")
    extracted_time: str | None = Field(default=None, alias="extractedTime")

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, value: Any) -> str:
        return _coerce_category(value)

    @classmethod
    def default(cls) -> "TaskMetadata":
        """Inert metadata used when refinement is skipped."""
        return cls(category="other", tags=[], is_urgent=False)


class TemplateDraft(BaseModel):
    """Reusable todo template generated from a free-text prompt."""

    model_config = ConfigDict(frozen=True)

    name: str = "Custom List"
    items: list[str] = Field(default_factory=list)
    category: Category = "other"
    tags: list[str] = Field(default_factory=list)

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, value: Any) -> str:
        return _coerce_category(value)


class TaskBreakdown(BaseModel):
    """Wire shape of the task breakdown response."""

    steps: list[str] = Field(default_factory=list)


@dataclass(frozen=True, slots=True)
class CacheFamily:
    """One operation family: its cache policy and value codec."""

    name: FamilyName
    ttl_s: float
    capacity: int
    adapter: TypeAdapter[Any]

    def dump(self, value: Any) -> JSONValue:
        """Encode one cached value into JSON-compatible data."""
        return self.adapter.dump_python(value, mode="json", by_alias=True)

    def load(self, raw: Any) -> Any:
        """Decode and validate one persisted value."""
        return self.adapter.validate_python(raw)
