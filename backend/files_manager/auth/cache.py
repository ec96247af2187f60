"""Expiring key/value store for session tokens, backed by Redis."""

import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from files_manager.config import Settings

log = logging.getLogger(__name__)


def create_redis_client(settings: Settings) -> Redis:
    """Return a Redis client for the configured URL (connects lazily)."""
    return Redis.from_url(settings.redis_url, decode_responses=True)


class TokenCache:
    """Set-with-expiry, get and delete over a Redis client.

    Expiry is left entirely to Redis; nothing here tracks timestamps.
    """

    def __init__(self, client: Redis) -> None:
        if client is None:
            raise ValueError("Redis client is required")
        self.client = client

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self.client.set(key, value, ex=ttl_seconds)

    async def get(self, key: str) -> Optional[str]:
        return await self.client.get(key)

    async def delete(self, key: str) -> int:
        """Delete key; return how many keys were removed (0 or 1)."""
        return await self.client.delete(key)

    async def is_alive(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            log.warning("Redis ping failed: %s", e)
            return False

    async def close(self) -> None:
        await self.client.aclose()
