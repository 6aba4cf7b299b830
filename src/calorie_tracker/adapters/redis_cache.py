"""Redis-backed cache."""

import json
import logging
from dataclasses import dataclass

import redis.asyncio as redis
from redis.exceptions import RedisError

from calorie_tracker.errors import CacheUnavailable

_SCAN_BATCH_SIZE = 500

_logger = logging.getLogger(__name__)


@dataclass
class RedisCache:
    """Cache backend storing JSON values in Redis."""

    client: redis.Redis

    @classmethod
    def create(cls, url: str, timeout_seconds: float = 2.0) -> "RedisCache":
        """Create a cache with a pooled Redis connection."""
        client = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
        )
        _logger.info("Redis cache configured")
        return cls(client=client)

    async def get(self, key: str) -> object | None:
        """Return the decoded value stored at a key."""
        try:
            raw = await self.client.get(key)
        except RedisError as exc:
            raise CacheUnavailable(str(exc)) from exc
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CacheUnavailable(f"Undecodable value at {key}") from exc

    async def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a JSON-encoded value with an expiry."""
        try:
            await self.client.set(key, json.dumps(value), ex=ttl_seconds)
        except RedisError as exc:
            raise CacheUnavailable(str(exc)) from exc

    async def delete(self, key: str) -> None:
        """Remove a single key."""
        try:
            await self.client.delete(key)
        except RedisError as exc:
            raise CacheUnavailable(str(exc)) from exc

    async def delete_by_pattern(self, pattern: str) -> int:
        """Scan for matching keys and delete them in batches; not atomic."""
        deleted = 0
        batch: list[str] = []
        try:
            keys = self.client.scan_iter(match=pattern, count=_SCAN_BATCH_SIZE)
            async for key in keys:
                batch.append(key)
                if len(batch) >= _SCAN_BATCH_SIZE:
                    deleted += await self.client.delete(*batch)
                    batch = []
            if batch:
                deleted += await self.client.delete(*batch)
        except RedisError as exc:
            raise CacheUnavailable(str(exc)) from exc
        return deleted

    async def ping(self) -> bool:
        """Return True when Redis answers."""
        try:
            return bool(await self.client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self.client.aclose()
