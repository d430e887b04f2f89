"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: utils.py.
"""

from __future__ import annotations

import random

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def normalize_text(text: str) -> str:
    """Lowercase and collapse whitespace for use in cache keys."""
    return " ".join(text.split()).lower()


def backoff_delay(
    attempt: int,
    base_s: float,
    *,
    rand: float | None = None,
) -> float:
    """Exponential backoff with multiplicative jitter in [0.8, 1.2)."""
    sample = random.random() if rand is None else rand
    return (2**attempt) * base_s * (0.8 + sample * 0.4)


def fnv1a_32(data: bytes) -> int:
    """32-bit FNV-1a hash."""
    value = _FNV32_OFFSET
    for byte in data:
        value ^= byte
        value = (value * _FNV32_PRIME) & 0xFFFFFFFF
    return value
