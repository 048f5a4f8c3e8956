from contentguard.core.enums import PRIMARY_PROVIDER, AIProvider, Severity
from contentguard.core.logging import get_logger
from contentguard.core.utils.image import prepare_inline_image
from contentguard.core.utils.json_response import parse_json_response
from contentguard.modules.moderation.prompts import build_vision_analysis_prompt
from contentguard.modules.moderation.providers import PROVIDER_FAILURES, ProviderClients
from contentguard.modules.moderation.schemas import AnalysisResult

logger = get_logger(__name__)

# Vision always tries OpenAI first, then Gemini, regardless of the preferred provider
VISION_PROVIDER_ORDER = (AIProvider.OPENAI, AIProvider.GEMINI)


class VisionAnalyzerService:
    """Analyzes images with vision-capable models.

    Ambiguity is routed to human review: when no vision model can analyze the image
    the result is unsafe with medium severity, never an approval.
    """

    def __init__(self, clients: ProviderClients, timeout_seconds: float = 60.0):
        self.clients = clients
        self.timeout_seconds = timeout_seconds

    async def analyze_image(self, image_url: str) -> AnalysisResult:
        """
        Analyze an image given as an http(s) URL or a ``data:image/...;base64,`` URI.

        Args:
            image_url: Image location or inline data URI

        Returns:
            AnalysisResult from the first vision provider that succeeds, otherwise the
            manual-review fallback result
        """
        result, _provider = await self.analyze(image_url)
        return result

    async def analyze(self, image_url: str) -> tuple[AnalysisResult, AIProvider]:
        """Same as ``analyze_image`` but also reports which provider served the result.

        Fallback and error results are attributed to the primary provider.
        """
        logger.debug("Analyzing image content")
        prompt = build_vision_analysis_prompt()

        try:
            for provider in VISION_PROVIDER_ORDER:
                if not self.clients.is_available(provider):
                    continue
                try:
                    result = await self._analyze_with(provider, image_url, prompt)
                    logger.debug(
                        f"{provider.value} vision result: is_safe={result.is_safe}, concerns={len(result.concerns)}"
                    )
                    return result, provider
                except PROVIDER_FAILURES as e:
                    logger.warning(f"{provider.value} vision analysis failed: {e}")

            return self._fallback_result(), PRIMARY_PROVIDER
        except Exception as e:
            logger.error(f"Critical error in image analysis: {e}", exc_info=True)
            return self._error_result(), PRIMARY_PROVIDER

    async def _analyze_with(self, provider: AIProvider, image_url: str, prompt: str) -> AnalysisResult:
        client = self.clients.require(provider)

        if provider is AIProvider.OPENAI:
            text = await client.complete_with_image(prompt, image_url)
        else:
            image = await prepare_inline_image(image_url, timeout_seconds=self.timeout_seconds)
            text = await client.complete_with_image(prompt, image)

        return AnalysisResult.model_validate(parse_json_response(text, provider=provider.value))

    @staticmethod
    def _fallback_result() -> AnalysisResult:
        logger.warning("All vision models failed")
        return AnalysisResult(
            is_safe=False,
            concerns=["Unable to analyze image content - vision models unavailable"],
            severity=Severity.MEDIUM,
            detailed_reason=(
                "Image analysis unavailable. This image will be reviewed manually "
                "to ensure it meets community guidelines."
            ),
        )

    @staticmethod
    def _error_result() -> AnalysisResult:
        return AnalysisResult(
            is_safe=False,
            concerns=["Image analysis system error"],
            severity=Severity.MEDIUM,
            detailed_reason=(
                "An error occurred while analyzing this image. It will be reviewed manually to ensure safety."
            ),
        )
