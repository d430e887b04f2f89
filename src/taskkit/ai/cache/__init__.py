"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .base import CacheEntry
from .families import build_families
from .lru import BoundedTTLCache

__all__ = [
    "CacheEntry",
    "BoundedTTLCache",
    "build_families",
]
