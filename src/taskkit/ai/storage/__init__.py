"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: storage/__init__.py.
"""

from .base import KeyValueStore
from .factory import create_store
from .file import JSONFileKeyValueStore
from .memory import InMemoryKeyValueStore
from .redis import RedisKeyValueStore

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JSONFileKeyValueStore",
    "RedisKeyValueStore",
    "create_store",
]
