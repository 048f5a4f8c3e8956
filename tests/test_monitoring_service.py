from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from contentguard.core.exception import ConfigurationError
from contentguard.modules.moderation.service import ModerationService
from contentguard.modules.monitoring.service import MonitoringService


def session_factory(fail: bool = False):
    session = MagicMock()
    session.execute = AsyncMock(side_effect=ConnectionError("db down") if fail else None)

    @asynccontextmanager
    async def factory():
        yield session

    return factory


@pytest.fixture
def moderation_service():
    service = MagicMock()
    service.agent.is_gemini_available.return_value = True
    return service


def test_health():
    health = MonitoringService(session_factory(), redis=MagicMock()).get_health()

    assert health.status == "ok"
    assert health.uptime_seconds >= 0


async def test_ready_when_all_checks_pass(redis, moderation_service):
    service = MonitoringService(session_factory(), redis=redis, moderation_provider=lambda: moderation_service)

    readiness = await service.get_readiness()

    assert readiness.status == "ready"
    assert set(readiness.checks) == {"database", "redis", "moderation"}
    assert readiness.checks["moderation"].message == "Moderation service active (openai, gemini)"


async def test_not_ready_when_database_fails(redis, moderation_service):
    service = MonitoringService(
        session_factory(fail=True), redis=redis, moderation_provider=lambda: moderation_service
    )

    readiness = await service.get_readiness()

    assert readiness.status == "not_ready"
    assert readiness.checks["database"].status == "error"
    assert readiness.checks["redis"].status == "ok"


async def test_not_ready_without_moderation_config(redis, fake_redis):
    def unconfigured():
        raise ConfigurationError("OpenAI API key is required")

    fake_redis.fail = True
    service = MonitoringService(session_factory(), redis=redis, moderation_provider=unconfigured)

    readiness = await service.get_readiness()

    assert readiness.status == "not_ready"
    assert readiness.checks["redis"].status == "error"
    assert readiness.checks["moderation"].message == "OpenAI API key is required"


def test_metrics_include_moderation_stats(config, cache, clients):
    moderation = ModerationService(config, cache, clients=clients)
    service = MonitoringService(session_factory(), redis=MagicMock(), moderation_provider=lambda: moderation)

    metrics = service.get_metrics()

    assert metrics.moderation.total_requests == 0
    assert metrics.process.pid > 0


def test_metrics_without_moderation_config():
    def unconfigured():
        raise ConfigurationError("missing key")

    metrics = MonitoringService(session_factory(), redis=MagicMock(), moderation_provider=unconfigured).get_metrics()

    assert metrics.moderation is None
