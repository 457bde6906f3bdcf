"""Durable file-backed cache.

Keeps the whole store in memory and rewrites it to a single JSON file after
every mutation. The file holds a pretty-printed list of ``[key, entry]``
pairs in insertion order:

    [
      [
        "session:1a2b",
        {
          "value": "{\"user\": 1}",
          "expires": 1735689600000
        }
      ]
    ]

Persistence failures are logged and swallowed: the in-memory store stays the
source of truth until the process restarts.
"""

import asyncio
import json
import time
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, TypeAdapter

from sitekit.core.cache.base import CacheClient, ttl_seconds
from sitekit.core.constants import CACHE_FILE_INDENT


logger = structlog.get_logger()


class CacheEntry(BaseModel):
    """A stored value and its absolute expiry in epoch milliseconds."""

    value: str
    expires: int | None = None


_StoreAdapter = TypeAdapter(list[tuple[str, CacheEntry]])


def _now_ms() -> int:
    return int(time.time() * 1000)


def _read_cache_file(path: Path) -> str | None:
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def _write_cache_file(path: Path, data: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data, encoding="utf-8")


async def _load_cache_data(path: Path, log: Any) -> dict[str, CacheEntry]:
    """Load a store from ``path``; any failure yields an empty store."""
    try:
        raw = await asyncio.to_thread(_read_cache_file, path)
        if raw is not None:
            return dict(_StoreAdapter.validate_python(json.loads(raw)))
    except Exception as exc:
        log.error("cache_load_failed", file_path=str(path), error=str(exc))
    return {}


class FileCacheClient(CacheClient):
    """In-process cache persisted to a flat JSON file.

    Use ``create_file_cache_client`` to construct one with state loaded
    from disk.
    """

    def __init__(
        self,
        file_path: str | Path,
        data: dict[str, CacheEntry] | None = None,
        log: Any = None,
    ) -> None:
        self.file_path = Path(file_path)
        self._data: dict[str, CacheEntry] = {} if data is None else data
        self._log = log or logger
        self._write_lock = asyncio.Lock()

    def _serialize(self) -> str:
        return json.dumps(
            _StoreAdapter.dump_python(list(self._data.items()), mode="json"),
            indent=CACHE_FILE_INDENT,
        )

    async def _persist(self) -> None:
        # Snapshot under the lock so overlapping writers land in order.
        async with self._write_lock:
            payload = self._serialize()
            try:
                await asyncio.to_thread(_write_cache_file, self.file_path, payload)
            except Exception as exc:
                self._log.error(
                    "cache_write_failed",
                    file_path=str(self.file_path),
                    error=str(exc),
                )

    async def get(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None

        if entry.expires is not None and _now_ms() > entry.expires:
            await self.delete(key)
            return None

        return entry.value

    async def get_item(self, key: str, field: str) -> str | None:
        try:
            raw = await self.get(key)
            if not raw:
                return None
            value = json.loads(raw).get(field)
        except Exception as exc:
            self._log.error(
                "cache_item_load_failed", key=key, field=field, error=str(exc)
            )
            return None
        return value if isinstance(value, str) else None

    async def get_items(self, key: str) -> dict[str, str] | None:
        try:
            raw = await self.get(key)
            if not raw:
                return None
            items = json.loads(raw)
        except Exception as exc:
            self._log.error("cache_items_load_failed", key=key, error=str(exc))
            return None

        if not isinstance(items, dict):
            self._log.error(
                "cache_items_load_failed", key=key, error="stored value is not a hash"
            )
            return None
        return items

    async def set(self, key: str, value: str, expires: int | None = None) -> None:
        ttl = ttl_seconds(expires)
        self._data[key] = CacheEntry(
            value=value,
            expires=_now_ms() + ttl * 1000 if ttl is not None else None,
        )
        await self._persist()

    async def set_item(self, key: str, field: str, value: str) -> None:
        # Rewrites through set() without a TTL, so any expiry on key is dropped.
        items = await self.get_items(key) or {}
        items[field] = value
        await self.set(key, json.dumps(items))

    async def delete(self, key: str) -> None:
        if key not in self._data:
            return

        del self._data[key]
        await self._persist()


async def create_file_cache_client(
    file_path: str | Path, log: Any = None
) -> FileCacheClient:
    """Create a file cache client with state loaded from ``file_path``.

    Args:
        file_path: Path of the JSON file backing the cache
        log: Optional structlog logger; defaults to the module logger

    Returns:
        The file cache client
    """
    path = Path(file_path)
    data = await _load_cache_data(path, log or logger)
    return FileCacheClient(path, data, log)
