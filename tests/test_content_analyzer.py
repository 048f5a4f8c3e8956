import pytest

from contentguard.core.enums import AIProvider, Severity
from contentguard.core.exception import ProviderError
from contentguard.modules.moderation.providers import ProviderClients
from contentguard.modules.moderation.services import ContentAnalyzerService
from contentguard.modules.moderation.services.content_analyzer import SAFE_DEFAULT_REASON
from tests.conftest import FLAGGED_ANALYSIS, make_gemini_client, make_openai_client


async def test_uses_preferred_provider(clients, openai_client, gemini_client):
    service = ContentAnalyzerService(clients, AIProvider.OPENAI)

    result, provider = await service.analyze("hello", "text")

    assert provider is AIProvider.OPENAI
    assert result.is_safe is True
    openai_client.complete.assert_awaited_once()
    gemini_client.complete.assert_not_awaited()


async def test_request_level_preference_overrides_default(clients, openai_client, gemini_client):
    service = ContentAnalyzerService(clients, AIProvider.OPENAI)

    _, provider = await service.analyze("hello", "text", preferred_provider=AIProvider.GEMINI)

    assert provider is AIProvider.GEMINI
    openai_client.complete.assert_not_awaited()


async def test_prompt_embeds_content_and_type(clients, openai_client):
    service = ContentAnalyzerService(clients)

    await service.analyze("some words", "text")

    prompt = openai_client.complete.await_args.args[0]
    assert "some words" in prompt
    assert "text" in prompt


async def test_falls_back_to_alternate_provider():
    openai_client = make_openai_client()
    openai_client.complete.side_effect = ProviderError("boom", provider="openai")
    gemini_client = make_gemini_client(FLAGGED_ANALYSIS)
    service = ContentAnalyzerService(ProviderClients(openai=openai_client, gemini=gemini_client))

    result, provider = await service.analyze("hello", "text")

    assert provider is AIProvider.GEMINI
    assert result.is_safe is False
    assert result.concerns == ["mild profanity"]


async def test_unparseable_completion_triggers_fallback():
    openai_client = make_openai_client("not json at all")
    gemini_client = make_gemini_client(FLAGGED_ANALYSIS)
    service = ContentAnalyzerService(ProviderClients(openai=openai_client, gemini=gemini_client))

    _, provider = await service.analyze("hello", "text")

    assert provider is AIProvider.GEMINI


async def test_all_providers_failing_defaults_to_safe():
    openai_client = make_openai_client()
    openai_client.complete.side_effect = ProviderError("down")
    gemini_client = make_gemini_client()
    gemini_client.complete.side_effect = ProviderError("down")
    service = ContentAnalyzerService(ProviderClients(openai=openai_client, gemini=gemini_client))

    result, provider = await service.analyze("hello", "text")

    assert provider is AIProvider.OPENAI
    assert result.is_safe is True
    assert result.severity is Severity.LOW
    assert result.detailed_reason == SAFE_DEFAULT_REASON


async def test_gemini_preference_without_gemini_uses_openai():
    openai_client = make_openai_client()
    service = ContentAnalyzerService(ProviderClients(openai=openai_client), AIProvider.GEMINI)

    _, provider = await service.analyze("hello", "text")

    assert provider is AIProvider.OPENAI


@pytest.mark.parametrize("error", [RuntimeError("unexpected"), KeyError("x")])
async def test_unexpected_errors_default_to_safe(error):
    openai_client = make_openai_client()
    openai_client.complete.side_effect = error
    service = ContentAnalyzerService(ProviderClients(openai=openai_client))

    result, provider = await service.analyze("hello", "text")

    assert result.is_safe is True
    assert provider is AIProvider.OPENAI
