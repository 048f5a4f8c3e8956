import os
import platform
import time
from datetime import UTC, datetime

from sqlalchemy import text

from contentguard.core.database import AsyncSessionLocal
from contentguard.core.exception import ConfigurationError
from contentguard.core.logging import get_logger
from contentguard.core.services.redis_service import RedisService, redis_service
from contentguard.modules.moderation.dependencies import get_moderation_service
from contentguard.modules.monitoring.schemas import (
    HealthResponse,
    MetricsResponse,
    ProcessInfo,
    ReadinessResponse,
    ServiceStatus,
)

logger = get_logger(__name__)

STARTED_AT = time.monotonic()


def _now() -> str:
    return datetime.now(tz=UTC).isoformat()


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class MonitoringService:
    """Liveness, readiness and metrics for the moderation backend."""

    def __init__(
        self,
        session_factory=AsyncSessionLocal,
        redis: RedisService = redis_service,
        moderation_provider=None,
    ):
        self.session_factory = session_factory
        self.redis = redis
        self.moderation_provider = moderation_provider or get_moderation_service

    def get_health(self) -> HealthResponse:
        return HealthResponse(status="ok", timestamp=_now(), uptime_seconds=round(time.monotonic() - STARTED_AT, 2))

    async def check_database(self) -> ServiceStatus:
        start = time.perf_counter()
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database readiness check failed: {e}")
            return ServiceStatus(
                name="database",
                status="error",
                message=f"Database connection failed: {e!s}",
                response_time_ms=_elapsed_ms(start),
            )

        return ServiceStatus(
            name="database", status="ok", message="Database connection active", response_time_ms=_elapsed_ms(start)
        )

    async def check_redis(self) -> ServiceStatus:
        start = time.perf_counter()
        try:
            await self.redis.ping()
        except Exception as e:
            logger.error(f"Redis readiness check failed: {e}")
            return ServiceStatus(
                name="redis",
                status="error",
                message=f"Redis connection failed: {e!s}",
                response_time_ms=_elapsed_ms(start),
            )

        return ServiceStatus(
            name="redis", status="ok", message="Redis connection active", response_time_ms=_elapsed_ms(start)
        )

    def check_moderation(self) -> ServiceStatus:
        try:
            service = self.moderation_provider()
        except ConfigurationError as e:
            return ServiceStatus(name="moderation", status="error", message=e.message)

        providers = "openai, gemini" if service.agent.is_gemini_available() else "openai"
        return ServiceStatus(name="moderation", status="ok", message=f"Moderation service active ({providers})")

    async def get_readiness(self) -> ReadinessResponse:
        checks = {
            "database": await self.check_database(),
            "redis": await self.check_redis(),
            "moderation": self.check_moderation(),
        }
        ready = all(check.status == "ok" for check in checks.values())

        if not ready:
            failed = [name for name, check in checks.items() if check.status != "ok"]
            logger.warning(f"Readiness check failed for: {', '.join(failed)}")

        return ReadinessResponse(status="ready" if ready else "not_ready", timestamp=_now(), checks=checks)

    def get_metrics(self) -> MetricsResponse:
        try:
            moderation_stats = self.moderation_provider().get_stats()
        except ConfigurationError:
            moderation_stats = None

        return MetricsResponse(
            timestamp=_now(),
            moderation=moderation_stats,
            process=ProcessInfo(
                pid=os.getpid(),
                uptime_seconds=round(time.monotonic() - STARTED_AT, 2),
                cpu_time_seconds=round(time.process_time(), 3),
                python_version=platform.python_version(),
            ),
        )


def get_monitoring_service() -> MonitoringService:
    return MonitoringService()
