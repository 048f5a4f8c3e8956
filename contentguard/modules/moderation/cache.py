"""Redis-backed cache of moderation results.

Identical content moderated under the same provider preference is answered from the
cache instead of a new pipeline run. The cache is an optimization only: every store
failure is logged and treated as a miss (or a skipped write).
"""

import hashlib
from dataclasses import dataclass

from contentguard.core.config import settings
from contentguard.core.enums import AIProvider, ContentType
from contentguard.core.logging import get_logger
from contentguard.core.services.redis_service import RedisService
from contentguard.modules.moderation.schemas import CacheStats, ModerationResult

logger = get_logger(__name__)

CACHE_PREFIX = "moderation:"


@dataclass
class _Counters:
    hits: int = 0
    misses: int = 0
    saves: int = 0


def generate_cache_key(content: str, content_type: ContentType, provider: AIProvider) -> str:
    """SHA-256 fingerprint of provider, content type and content."""
    digest = hashlib.sha256(f"{provider.value}:{content_type.value}:{content}".encode()).hexdigest()
    return f"{CACHE_PREFIX}{digest}"


class ModerationCache:
    def __init__(self, redis: RedisService, ttl_seconds: int = settings.MODERATION_CACHE_TTL_SECONDS):
        self.redis = redis
        self.ttl_seconds = ttl_seconds
        self._stats = _Counters()

    async def get(self, content: str, content_type: ContentType, provider: AIProvider) -> ModerationResult | None:
        """Return the cached result, or None on a miss or a cache error."""
        key = generate_cache_key(content, content_type, provider)

        try:
            cached = await self.redis.get(key)
            if cached:
                result = ModerationResult.model_validate_json(cached)
                self._stats.hits += 1
                logger.debug(f"Cache HIT: {key[:20]}...")
                return result
        except Exception as e:
            logger.warning(f"Cache read error: {e}")
            return None

        self._stats.misses += 1
        logger.debug(f"Cache MISS: {key[:20]}...")
        return None

    async def set(
        self,
        content: str,
        content_type: ContentType,
        provider: AIProvider,
        result: ModerationResult,
    ) -> None:
        key = generate_cache_key(content, content_type, provider)

        try:
            await self.redis.set(key, result.model_dump_json(), expire=self.ttl_seconds)
            self._stats.saves += 1
            logger.debug(f"Cached result for {self.ttl_seconds}s: {key[:20]}...")
        except Exception as e:
            logger.warning(f"Cache write error: {e}")

    async def invalidate(self, content: str, content_type: ContentType, provider: AIProvider) -> None:
        key = generate_cache_key(content, content_type, provider)

        try:
            await self.redis.delete(key)
            logger.debug(f"Invalidated cache for key: {key[:20]}...")
        except Exception as e:
            logger.warning(f"Cache invalidation error: {e}")

    async def clear_all(self) -> int:
        """Delete every moderation cache entry.

        Returns:
            Number of keys deleted (0 on error)
        """
        try:
            deleted = await self.redis.delete_by_prefix(CACHE_PREFIX)
            logger.info(f"Cleared {deleted} moderation cache entries")
            return deleted
        except Exception as e:
            logger.error(f"Error clearing moderation cache: {e}")
            return 0

    def get_stats(self) -> CacheStats:
        total = self._stats.hits + self._stats.misses
        hit_rate = round(self._stats.hits / total * 100, 2) if total else 0.0
        return CacheStats(
            hits=self._stats.hits,
            misses=self._stats.misses,
            saves=self._stats.saves,
            total=total,
            hit_rate=hit_rate,
        )

    def log_stats(self) -> None:
        stats = self.get_stats()
        logger.info(
            f"Cache Stats - Hits: {stats.hits}, Misses: {stats.misses}, "
            f"Hit Rate: {stats.hit_rate:.2f}%, Total Saves: {stats.saves}"
        )
