"""Cache abstractions and the fault-tolerant cache gateway."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from fnmatch import fnmatchcase
from typing import Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

from calorie_tracker.errors import CacheUnavailable

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 3600

_logger = logging.getLogger(__name__)


class Cache(Protocol):
    """Key-value backend holding JSON-serializable values."""

    async def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    async def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""

    async def delete(self, key: str) -> None:
        """Remove a single key."""

    async def delete_by_pattern(self, pattern: str) -> int:
        """Remove all keys matching a glob pattern and return how many."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """In-process cache used when no Redis URL is configured."""

    _entries: dict[str, _CacheEntry]

    def __init__(self) -> None:
        self._entries = {}

    async def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    async def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    async def delete(self, key: str) -> None:
        """Remove a key if present."""
        self._entries.pop(key, None)

    async def delete_by_pattern(self, pattern: str) -> int:
        """Remove every key matching the glob pattern."""
        matched = [key for key in self._entries if fnmatchcase(key, pattern)]
        for key in matched:
            del self._entries[key]
        return len(matched)

    def keys(self) -> list[str]:
        """Return the stored keys, including expired ones not yet evicted."""
        return list(self._entries)


@dataclass
class CacheGateway:
    """Uniform cache access with a default TTL.

    Backend failures never propagate: reads degrade to a miss and writes or
    deletions report False (or 0 for pattern deletes) after logging a warning.
    The cache is a disposable view over the store, so losing an operation
    costs performance only.
    """

    backend: Cache
    default_ttl_seconds: int = DEFAULT_TTL_SECONDS
    timeout_seconds: float = 2.0

    async def get(self, key: str) -> object | None:
        """Return the cached value for a key, or None on a miss or failure."""
        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await self.backend.get(key)
        except (CacheUnavailable, TimeoutError) as exc:
            _logger.warning("Cache get failed for %s: %s", key, exc)
            return None

    async def get_typed(self, key: str, adapter: TypeAdapter[T]) -> T | None:
        """Return the cached value validated by the adapter.

        An entry that no longer matches the expected shape counts as a miss and
        is dropped so the caller recomputes and rewrites it.
        """
        cached = await self.get(key)
        if cached is None:
            return None
        try:
            return adapter.validate_python(cached)
        except ValidationError as exc:
            _logger.warning("Discarding unreadable cache entry %s: %s", key, exc)
            await self.delete(key)
            return None

    async def set(
        self, key: str, value: object, ttl_seconds: int | None = None
    ) -> bool:
        """Store a value, using the default TTL when none is given."""
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl_seconds
        try:
            async with asyncio.timeout(self.timeout_seconds):
                await self.backend.set(key, value, ttl)
        except (CacheUnavailable, TimeoutError) as exc:
            _logger.warning("Cache set failed for %s: %s", key, exc)
            return False
        return True

    async def delete(self, key: str) -> bool:
        """Delete a single key."""
        try:
            async with asyncio.timeout(self.timeout_seconds):
                await self.backend.delete(key)
        except (CacheUnavailable, TimeoutError) as exc:
            _logger.warning("Cache delete failed for %s: %s", key, exc)
            return False
        return True

    async def delete_by_pattern(self, pattern: str) -> int:
        """Delete all keys matching a glob pattern; not atomic."""
        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await self.backend.delete_by_pattern(pattern)
        except (CacheUnavailable, TimeoutError) as exc:
            _logger.warning("Cache delete by pattern failed for %s: %s", pattern, exc)
            return 0
