from unittest.mock import AsyncMock, MagicMock

import pytest

from contentguard.core.enums import AIProvider, ContentType, ModerationDecision
from contentguard.core.exception import ConfigurationError, ModerationProcessingError
from contentguard.modules.moderation.config import ModerationConfig
from contentguard.modules.moderation.schemas import ModerationState
from contentguard.modules.moderation.service import ModerationService
from tests.conftest import FLAGGED_ANALYSIS, completion


@pytest.fixture
def service(config, cache, clients) -> ModerationService:
    return ModerationService(config, cache, clients=clients, cost_per_ai_request=0.005)


def test_requires_openai_key(cache, clients):
    with pytest.raises(ConfigurationError):
        ModerationService(ModerationConfig(openai_api_key=""), cache, clients=clients)


async def test_repeated_content_is_served_from_cache(service, openai_client):
    first = await service.moderate_content("hello", ContentType.TEXT)
    second = await service.moderate_content("hello", ContentType.TEXT)

    assert first == second
    assert first.decision is ModerationDecision.APPROVED
    openai_client.complete.assert_awaited_once()

    stats = service.get_stats()
    assert stats.total_requests == 2
    assert stats.cached_requests == 1
    assert stats.ai_requests == 1
    assert stats.cache_hit_rate == 50.0
    assert stats.estimated_cost_savings == pytest.approx(0.005)
    assert stats.cache_stats.hits == 1


async def test_provider_preference_gets_its_own_cache_entry(service, openai_client, gemini_client):
    openai_result = await service.moderate_content("hello", ContentType.TEXT)
    gemini_result = await service.moderate_content("hello", ContentType.TEXT, AIProvider.GEMINI)

    assert openai_result.ai_provider is AIProvider.OPENAI
    assert gemini_result.ai_provider is AIProvider.GEMINI
    openai_client.complete.assert_awaited_once()
    gemini_client.complete.assert_awaited_once()
    assert service.get_stats().cached_requests == 0


async def test_agents_are_reused_per_provider(service):
    await service.moderate_content("one", ContentType.TEXT, AIProvider.GEMINI)
    gemini_agent = service._agent_for(AIProvider.GEMINI)
    await service.moderate_content("two", ContentType.TEXT, AIProvider.GEMINI)

    assert service._agent_for(AIProvider.GEMINI) is gemini_agent
    assert gemini_agent is not service.agent
    assert gemini_agent.preferred_provider is AIProvider.GEMINI


async def test_flagged_result_carries_visualization(service, openai_client):
    openai_client.complete.side_effect = [FLAGGED_ANALYSIS, completion({"shouldGenerate": True, "reasoning": "x"})]

    result = await service.moderate_content("borderline", ContentType.TEXT)

    assert result.decision is ModerationDecision.FLAGGED
    assert result.visualization_url == "https://images.example/v.png"
    assert [c.value for c in result.classification] == ["flagged"]


async def test_incomplete_pipeline_result_is_rejected(config, cache):
    agent = MagicMock()
    agent.is_gemini_available.return_value = False
    agent.moderate = AsyncMock(return_value=ModerationState(content="x", content_type=ContentType.TEXT))
    service = ModerationService(config, cache, agent_factory=lambda *args, **kwargs: agent)

    with pytest.raises(ModerationProcessingError):
        await service.moderate_content("x", ContentType.TEXT)

    assert cache.get_stats().saves == 0


async def test_pipeline_errors_propagate_and_are_not_cached(config, cache):
    agent = MagicMock()
    agent.is_gemini_available.return_value = False
    agent.moderate = AsyncMock(side_effect=RuntimeError("pipeline down"))
    service = ModerationService(config, cache, agent_factory=lambda *args, **kwargs: agent)

    with pytest.raises(RuntimeError):
        await service.moderate_content("x", ContentType.TEXT)

    stats = service.get_stats()
    assert stats.total_requests == 1
    assert stats.ai_requests == 1
    assert cache.get_stats().saves == 0


def test_empty_stats(service):
    stats = service.get_stats()

    assert stats.total_requests == 0
    assert stats.cache_hit_rate == 0.0
    assert stats.estimated_cost_savings == 0.0


async def test_log_performance_stats(service, caplog):
    await service.moderate_content("hello", ContentType.TEXT)

    with caplog.at_level("INFO", logger="contentguard.modules.moderation.service"):
        service.log_performance_stats()

    assert "Performance Stats - Total: 1" in caplog.text
