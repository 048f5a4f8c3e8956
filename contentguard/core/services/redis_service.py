from datetime import timedelta

from redis.asyncio import Redis

from contentguard.core.config import settings


class RedisService:
    def __init__(self, client: Redis | None = None):
        self.client = client or Redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)

    async def set(self, key: str, value: str | int, expire: int | timedelta):
        """Set value in Redis."""
        await self.client.set(key, value, ex=expire)

    async def get(self, key: str) -> str | None:
        """Get value from Redis."""
        return await self.client.get(key)

    async def delete(self, *keys: str) -> int:
        """Delete keys from Redis."""
        if keys:
            return await self.client.delete(*keys)
        return 0

    async def ping(self) -> bool:
        return await self.client.ping()

    async def close(self):
        """Close Redis connection."""
        await self.client.aclose()

    async def delete_by_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix`` using SCAN for safe iteration."""
        keys: list[str] = []

        cursor = 0
        while True:
            cursor, batch = await self.client.scan(cursor, match=f"{prefix}*", count=100)
            keys.extend(batch)
            if cursor == 0:
                break

        return await self.delete(*keys)

    async def check_rate_limit(self, key: str, limit: int, window: int) -> bool:
        """
        Checks the rate limit for the specified key.

        Args:
            key: Redis key (e.g., rate_limit:user:<id>:/api/v1/content/submit)
            limit: Maximum number of allowed requests (e.g., 5)
            window: Duration window in seconds (e.g., 60)

        Returns:
            bool: True if the limit has not been exceeded, False if it has been exceeded
        """

        current_count = await self.client.incr(key)

        if current_count == 1:
            await self.client.expire(key, window)

        return current_count <= limit


redis_service = RedisService()


async def get_redis_service() -> RedisService:
    return redis_service
