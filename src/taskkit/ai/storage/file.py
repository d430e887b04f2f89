"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

JSON-file key-value store for on-device durability.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from ..errors import StorageError
from .base import KeyValueStore

logger = logging.getLogger("taskkit.ai.storage")


class JSONFileKeyValueStore(KeyValueStore):
    """
    Key-value store persisted as one JSON object on disk.

    Writes go to a temporary sibling file and are moved into place with
    ``os.replace`` so a crash mid-write never leaves a truncated document.
    Blocking file I/O runs in a worker thread.

    Args:
        path: Location of the JSON document; parent directories are created.
    """

    backend_id = "file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    def _read_all(self, *, replace_corrupt: bool = False) -> dict[str, str]:
        """Read every row; a corrupt document is either an error or, when
        `replace_corrupt` is set, treated as empty so the next write replaces it."""
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as error:
            raise StorageError(f"Cannot read store '{self.path}': {error}") from error
        try:
            data = json.loads(text)
        except json.JSONDecodeError as error:
            if replace_corrupt:
                logger.warning("Replacing corrupt store document '%s': %s", self.path, error)
                return {}
            raise StorageError(f"Cannot read store '{self.path}': {error}") from error
        if not isinstance(data, dict):
            if replace_corrupt:
                logger.warning("Replacing non-object store document '%s'", self.path)
                return {}
            raise StorageError(f"Store '{self.path}' is not a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, rows: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(rows, handle, ensure_ascii=True)
            os.replace(tmp, self.path)
        except OSError as error:
            raise StorageError(f"Cannot write store '{self.path}': {error}") from error

    def _update(self, key: str, value: str | None) -> None:
        rows = self._read_all(replace_corrupt=True)
        if value is None:
            if key not in rows:
                return
            rows.pop(key)
        else:
            rows[key] = value
        self._write_all(rows)

    async def get(self, key: str) -> str | None:
        rows = await asyncio.to_thread(self._read_all)
        return rows.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            await asyncio.to_thread(self._update, key, value)

    async def delete(self, key: str) -> None:
        async with self._lock:
            await asyncio.to_thread(self._update, key, None)
