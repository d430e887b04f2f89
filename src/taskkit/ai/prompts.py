"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Prompt text, response schemas and response parsing for the AI operations.
"""

from __future__ import annotations

import json

from pydantic import ValidationError

from .errors import InvalidResponseError
from .types import JSONSchema, TaskBreakdown, TaskMetadata, TemplateDraft

DEFAULT_MOTIVATION = "Let's make today beautiful!"

_CATEGORY_SCHEMA: JSONSchema = {
    "type": "string",
    "enum": ["work", "personal", "health", "other"],
}
_STRING_LIST_SCHEMA: JSONSchema = {"type": "array", "items": {"type": "string"}}

REFINE_SCHEMA: JSONSchema = {
    "type": "object",
    "properties": {
        "category": _CATEGORY_SCHEMA,
        "tags": _STRING_LIST_SCHEMA,
        "isUrgent": {"type": "boolean"},
        "extractedTime": {
            "type": "string",
            "description": "The extracted time or deadline if found",
        },
    },
    "required": ["category", "tags", "isUrgent"],
}

BREAKDOWN_SCHEMA: JSONSchema = {
    "type": "object",
    "properties": {"steps": _STRING_LIST_SCHEMA},
    "required": ["steps"],
}

TEMPLATE_SCHEMA: JSONSchema = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "category": _CATEGORY_SCHEMA,
        "tags": _STRING_LIST_SCHEMA,
        "items": _STRING_LIST_SCHEMA,
    },
    "required": ["name", "items", "category", "tags"],
}


def motivation_prompt(pending_count: int) -> str:
    return (
        "Give me a short, refreshing, and encouraging one-sentence quote for "
        f"someone who has {pending_count} tasks remaining. Keep it breezy and cool."
    )


def refine_prompt(text: str) -> str:
    return (
        f'Task: "{text}".\n'
        "1. Categorize: work, personal, health, or other.\n"
        "2. Tags: 2-3 relevant tags.\n"
        "3. Urgency: Is this time-sensitive? (e.g., contains 'today', 'tomorrow', "
        "a specific time like '5pm', or 'urgent').\n"
        "4. Extraction: If a specific time or deadline is mentioned, extract it "
        "concisely (e.g., '5:00 PM', 'EOD')."
    )


def breakdown_prompt(text: str) -> str:
    return f'Break down this task into 3-5 simple, actionable sub-tasks: "{text}"'


def template_prompt(prompt: str) -> str:
    return (
        f'The user wants a REUSABLE todo list template for: "{prompt}".\n'
        "- Keep items GENERIC and reusable.\n"
        "- Focus on categories and placeholders.\n"
        "- Create a catchy name.\n"
        "- Choose a category (work, personal, health, other).\n"
        "- Suggest 2-3 tags for the WHOLE TEMPLATE."
    )


def _json_object(raw: str) -> dict:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as error:
        raise InvalidResponseError(f"Model returned invalid JSON: {error}") from error
    if not isinstance(data, dict):
        raise InvalidResponseError("Model returned JSON that is not an object")
    return data


def parse_motivation(raw: str) -> str:
    return raw.strip() or DEFAULT_MOTIVATION


def parse_refine(raw: str) -> TaskMetadata:
    if not raw.strip():
        return TaskMetadata.default()
    try:
        return TaskMetadata.model_validate(_json_object(raw))
    except ValidationError as error:
        raise InvalidResponseError(str(error)) from error


def parse_breakdown(raw: str) -> list[str]:
    if not raw.strip():
        return []
    try:
        return TaskBreakdown.model_validate(_json_object(raw)).steps
    except ValidationError as error:
        raise InvalidResponseError(str(error)) from error


def parse_template(raw: str) -> TemplateDraft:
    if not raw.strip():
        return TemplateDraft()
    try:
        return TemplateDraft.model_validate(_json_object(raw))
    except ValidationError as error:
        raise InvalidResponseError(str(error)) from error
