import fnmatch
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from contentguard.core.enums import AIProvider
from contentguard.core.openai_client import GeneratedImage
from contentguard.core.services.redis_service import RedisService
from contentguard.modules.moderation.cache import ModerationCache
from contentguard.modules.moderation.config import ModerationConfig
from contentguard.modules.moderation.providers import ProviderClients


class FakeRedis:
    """In-memory stand-in for ``redis.asyncio.Redis`` covering the commands the app uses."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.expirations: dict[str, int] = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise ConnectionError("redis unavailable")

    async def set(self, key, value, ex=None):
        self._check()
        self.store[key] = str(value)
        if ex is not None:
            self.expirations[key] = ex
        return True

    async def get(self, key):
        self._check()
        return self.store.get(key)

    async def delete(self, *keys):
        self._check()
        deleted = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                deleted += 1
        return deleted

    async def scan(self, cursor=0, match=None, count=None):
        self._check()
        keys = [key for key in self.store if match is None or fnmatch.fnmatch(key, match)]
        return 0, keys

    async def incr(self, key):
        self._check()
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value

    async def expire(self, key, seconds):
        self.expirations[key] = seconds
        return True

    async def ping(self):
        self._check()
        return True

    async def aclose(self):
        return None


def completion(payload: dict) -> str:
    return json.dumps(payload)


SAFE_ANALYSIS = completion({"isSafe": True, "concerns": [], "severity": "low", "detailedReason": "Looks fine"})
FLAGGED_ANALYSIS = completion(
    {"isSafe": False, "concerns": ["mild profanity"], "severity": "medium", "detailedReason": "Contains profanity"}
)
HARMFUL_ANALYSIS = completion(
    {"isSafe": False, "concerns": ["graphic violence"], "severity": "high", "detailedReason": None}
)


def make_openai_client(text: str = SAFE_ANALYSIS, image_url: str | None = "https://images.example/v.png"):
    client = MagicMock()
    client.image_model = "dall-e-3"
    client.complete = AsyncMock(return_value=text)
    client.complete_with_image = AsyncMock(return_value=text)
    client.generate_image = AsyncMock(return_value=GeneratedImage(url=image_url, revised_prompt="revised"))
    return client


def make_gemini_client(text: str = SAFE_ANALYSIS):
    client = MagicMock()
    client.complete = AsyncMock(return_value=text)
    client.complete_with_image = AsyncMock(return_value=text)
    return client


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis(fake_redis) -> RedisService:
    return RedisService(client=fake_redis)


@pytest.fixture
def cache(redis) -> ModerationCache:
    return ModerationCache(redis, ttl_seconds=3600)


@pytest.fixture
def openai_client():
    return make_openai_client()


@pytest.fixture
def gemini_client():
    return make_gemini_client()


@pytest.fixture
def clients(openai_client, gemini_client) -> ProviderClients:
    return ProviderClients(openai=openai_client, gemini=gemini_client)


@pytest.fixture
def config() -> ModerationConfig:
    return ModerationConfig(openai_api_key="sk-test", gemini_api_key="gm-test", preferred_provider=AIProvider.OPENAI)
