from contentguard.core.enums import PRIMARY_PROVIDER, AIProvider, Severity
from contentguard.core.logging import get_logger
from contentguard.core.utils.json_response import parse_json_response
from contentguard.modules.moderation.prompts import build_content_analysis_prompt
from contentguard.modules.moderation.providers import PROVIDER_FAILURES, ProviderClients
from contentguard.modules.moderation.schemas import AnalysisResult

logger = get_logger(__name__)

SAFE_DEFAULT_REASON = "Analysis failed, defaulting to safe"


class ContentAnalyzerService:
    """Analyzes text and URL content with text models, preferred provider first.

    When every provider fails the content is treated as safe. This fail-open default
    differs from image analysis, which fails closed to manual review.
    """

    def __init__(self, clients: ProviderClients, preferred_provider: AIProvider = AIProvider.OPENAI):
        self.clients = clients
        self.preferred_provider = preferred_provider
        logger.info(
            f"ContentAnalyzer initialized with preferred provider: {preferred_provider.value}, "
            f"Gemini available: {clients.is_available(AIProvider.GEMINI)}"
        )

    async def analyze(
        self,
        content: str,
        content_type: str,
        preferred_provider: AIProvider | None = None,
    ) -> tuple[AnalysisResult, AIProvider]:
        """
        Analyze text/URL content for safety and appropriateness.

        Args:
            content: Raw text or URL
            content_type: Content type label embedded in the prompt
            preferred_provider: Provider to try first (defaults to the configured one)

        Returns:
            tuple: (analysis result, provider that produced it)
        """
        preferred = preferred_provider or self.preferred_provider
        prompt = build_content_analysis_prompt(content, content_type)

        try:
            for provider in self.clients.ordered(preferred):
                try:
                    result = await self._analyze_with(provider, prompt)
                except PROVIDER_FAILURES as e:
                    logger.error(f"{provider.value} analysis failed: {e}")
                    continue

                if provider is not preferred:
                    logger.info(f"Fallback to {provider.value} successful")

                logger.debug(
                    f"Analysis complete - provider={provider.value}, safe={result.is_safe}, "
                    f"severity={result.severity.value}"
                )
                return result, provider

            logger.error("All providers failed")
        except Exception as e:
            logger.error(f"Content analysis failed unexpectedly: {e}", exc_info=True)

        return self._safe_default(), PRIMARY_PROVIDER

    async def _analyze_with(self, provider: AIProvider, prompt: str) -> AnalysisResult:
        client = self.clients.require(provider)
        text = await client.complete(prompt)
        return AnalysisResult.model_validate(parse_json_response(text, provider=provider.value))

    @staticmethod
    def _safe_default() -> AnalysisResult:
        return AnalysisResult(
            is_safe=True,
            concerns=[],
            severity=Severity.LOW,
            detailed_reason=SAFE_DEFAULT_REASON,
        )
