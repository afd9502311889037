"""Local persistent key-value store backing the custom layers.

The whole store is one JSON document on disk: {key: value, ...}.
File I/O runs in a worker thread so callers on the event loop never block.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Protocol

from loguru import logger


class KeyValueStore(Protocol):
    """Asynchronous get/set of JSON-serializable values."""

    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any) -> None: ...


class JsonFileStore:
    """KeyValueStore persisted to a single JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any:
        """Return the value stored under key, or None if absent."""
        data = await asyncio.to_thread(self._read)
        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        """Replace the value stored under key.

        An existing file that is not a JSON object is replaced by a fresh
        document holding only this key.
        """
        async with self._lock:
            try:
                data = await asyncio.to_thread(self._read)
            except (ValueError, RecursionError) as e:
                logger.warning(f"Overwriting unreadable store file {self.path}: {e}")
                data = {}
            data[key] = value
            await asyncio.to_thread(self._write, data)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Store file is not a JSON object: {self.path}")
        return data

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, self.path)
