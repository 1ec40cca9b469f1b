from __future__ import annotations

from redis import asyncio as aioredis


class StreamsClient:
    """Thin owner of an asyncio Redis connection used for streams."""
    def __init__(self, redis: aioredis.Redis) -> None:
        self.redis = redis

    @classmethod
    def from_url(cls, url: str) -> StreamsClient:
        return cls(aioredis.from_url(url, decode_responses=True))

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self.redis.aclose()
