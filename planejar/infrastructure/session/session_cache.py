"""Local JSON key/value file for persisting the session between runs.

Writes go to a temp file in the same directory and are renamed into
place, so a crash never leaves a half-written cache.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

logger = logging.getLogger(__name__)


def _private_opener(path: str, flags: int) -> int:
    """Create the file owner-read/write only."""
    return os.open(path, flags, 0o600)


class FileSessionCache:
    """ISessionCache backed by one JSON object in a file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    async def _read_all(self) -> dict[str, Any]:
        if not await aiofiles.os.path.exists(self.path):
            return {}
        try:
            async with aiofiles.open(self.path, encoding="utf-8") as f:
                raw = await f.read()
        except OSError as exc:
            logger.warning("Could not read session cache %s: %s", self.path, exc)
            return {}
        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError:
            logger.warning("Session cache %s is corrupt; ignoring it", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    async def _write_all(self, data: dict[str, Any]) -> None:
        await aiofiles.os.makedirs(self.path.parent, mode=0o700, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        if await aiofiles.os.path.exists(tmp_path):
            await aiofiles.os.remove(tmp_path)
        async with aiofiles.open(tmp_path, "w", encoding="utf-8", opener=_private_opener) as f:
            await f.write(json.dumps(data, indent=2))
        await aiofiles.os.replace(tmp_path, self.path)

    async def get(self, key: str) -> Any:
        """Return cached value or None."""
        async with self._lock:
            data = await self._read_all()
        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = await self._read_all()
            data[key] = value
            await self._write_all(data)

    async def delete(self, key: str) -> None:
        """Remove key; missing keys are ignored."""
        async with self._lock:
            data = await self._read_all()
            if key not in data:
                return
            del data[key]
            await self._write_all(data)
