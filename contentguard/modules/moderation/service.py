import asyncio
from collections.abc import Callable
from dataclasses import dataclass

from contentguard.core import events
from contentguard.core.config import settings
from contentguard.core.enums import AIProvider, ContentType
from contentguard.core.exception import ConfigurationError, ModerationProcessingError
from contentguard.core.logging import get_logger
from contentguard.modules.moderation.agent import ModerationAgent
from contentguard.modules.moderation.cache import ModerationCache
from contentguard.modules.moderation.config import ModerationConfig
from contentguard.modules.moderation.providers import ProviderClients
from contentguard.modules.moderation.schemas import ModerationResult, ModerationStats

logger = get_logger(__name__)


@dataclass
class _RequestCounters:
    total_requests: int = 0
    cached_requests: int = 0
    ai_requests: int = 0


class ModerationService:
    """Cache-aware entry point to the moderation pipeline.

    Keeps one agent per preferred provider; the default agent is built eagerly and an
    agent for another provider is built from ``config.with_provider()`` on first use.
    Counter updates never span an ``await``, so concurrent submissions on the event
    loop cannot lose increments.
    """

    def __init__(
        self,
        config: ModerationConfig,
        cache: ModerationCache,
        clients: ProviderClients | None = None,
        cost_per_ai_request: float = settings.COST_PER_AI_REQUEST,
        agent_factory: Callable[..., ModerationAgent] = ModerationAgent,
    ):
        if not config.openai_api_key:
            raise ConfigurationError("OpenAI API key is required")

        self.config = config
        self.cache = cache
        self.cost_per_ai_request = cost_per_ai_request
        self._clients = clients
        self._agent_factory = agent_factory
        self._counters = _RequestCounters()

        self.agent = self._agent_factory(config, clients=clients)
        self._agents: dict[AIProvider, ModerationAgent] = {config.preferred_provider: self.agent}

        logger.info(
            f"Moderation service initialized - preferred provider: {config.preferred_provider.value}, "
            f"Gemini: {'enabled' if self.agent.is_gemini_available() else 'disabled'}"
        )

    def _agent_for(self, provider: AIProvider) -> ModerationAgent:
        agent = self._agents.get(provider)
        if agent is None:
            logger.info(f"Creating moderation agent for provider: {provider.value}")
            agent = self._agent_factory(self.config.with_provider(provider), clients=self._clients)
            self._agents[provider] = agent
        return agent

    async def moderate_content(
        self,
        content: str,
        content_type: ContentType,
        ai_provider: AIProvider | None = None,
    ) -> ModerationResult:
        """
        Moderate one piece of content, answering from cache when possible.

        Args:
            content: Text, URL or data URI
            content_type: text or image
            ai_provider: Preferred analysis provider (defaults to the configured one)

        Returns:
            ModerationResult

        Raises:
            ModerationProcessingError: If the pipeline produced no decision or reasoning
            Exception: Pipeline failures are propagated to the caller
        """
        provider = ai_provider or self.config.preferred_provider
        self._counters.total_requests += 1
        logger.info(f"Moderating {content_type.value} content (provider: {provider.value})")

        cached = await self.cache.get(content, content_type, provider)
        if cached is not None:
            self._counters.cached_requests += 1
            logger.info("Using cached moderation result (saved AI API call)")
            events.emit_event(
                events.MODERATION_COMPLETED, decision=cached.decision, provider=cached.ai_provider, cached=True
            )
            return cached

        self._counters.ai_requests += 1

        try:
            state = await self._agent_for(provider).moderate(content, content_type)
        except Exception as e:
            logger.error(f"Moderation failed: {e}", exc_info=True)
            raise

        if state.decision is None or not state.reasoning:
            raise ModerationProcessingError("Invalid moderation result: missing decision or reasoning")

        result = ModerationResult.from_state(state)
        await self.cache.set(content, content_type, provider, result)

        events.emit_event(
            events.MODERATION_COMPLETED, decision=result.decision, provider=result.ai_provider, cached=False
        )
        return result

    def get_stats(self) -> ModerationStats:
        counters = self._counters
        cache_hit_rate = (
            round(counters.cached_requests / counters.total_requests * 100, 2) if counters.total_requests else 0.0
        )
        return ModerationStats(
            total_requests=counters.total_requests,
            cached_requests=counters.cached_requests,
            ai_requests=counters.ai_requests,
            cache_hit_rate=cache_hit_rate,
            estimated_cost_savings=round(counters.cached_requests * self.cost_per_ai_request, 4),
            cache_stats=self.cache.get_stats(),
        )

    def log_performance_stats(self) -> None:
        stats = self.get_stats()
        logger.info(
            f"Performance Stats - Total: {stats.total_requests}, "
            f"Cached: {stats.cached_requests}, AI Calls: {stats.ai_requests}, "
            f"Cache Hit Rate: {stats.cache_hit_rate:.2f}%, "
            f"Est. Cost Savings: ${stats.estimated_cost_savings:.4f}"
        )
        self.cache.log_stats()

    async def run_stats_logger(self, interval_seconds: int = settings.STATS_LOG_INTERVAL_SECONDS) -> None:
        """Log performance stats every ``interval_seconds`` until cancelled."""
        while True:
            await asyncio.sleep(interval_seconds)
            self.log_performance_stats()
