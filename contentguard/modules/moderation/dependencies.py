from functools import lru_cache

from contentguard.core.services.redis_service import redis_service
from contentguard.modules.moderation.cache import ModerationCache
from contentguard.modules.moderation.config import ModerationConfig
from contentguard.modules.moderation.service import ModerationService


@lru_cache
def get_moderation_service() -> ModerationService:
    """Process-wide moderation service, built on first use.

    Raises:
        ConfigurationError: If the OpenAI API key is not configured
    """
    return ModerationService(ModerationConfig.from_settings(), ModerationCache(redis_service))
