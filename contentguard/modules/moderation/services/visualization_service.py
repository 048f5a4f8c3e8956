from contentguard.core.enums import PRIMARY_PROVIDER, AIProvider
from contentguard.core.logging import get_logger
from contentguard.core.utils.json_response import parse_json_response
from contentguard.modules.moderation.prompts import (
    build_visualization_decision_prompt,
    build_visualization_image_prompt,
)
from contentguard.modules.moderation.providers import PROVIDER_FAILURES, ProviderClients
from contentguard.modules.moderation.schemas import ModerationState, VisualizationDecision

logger = get_logger(__name__)


class VisualizationService:
    """Decides whether flagged content deserves an explanatory image, and generates it.

    Visualization is a reviewer convenience: every failure resolves to "no
    visualization" and is never raised to the pipeline.
    """

    def __init__(self, clients: ProviderClients, image_size: str = "1024x1024", image_quality: str = "standard"):
        self.clients = clients
        self.image_size = image_size
        self.image_quality = image_quality

    async def should_generate_visualization(self, state: ModerationState) -> bool:
        """Ask an AI model whether a visual preview would help reviewers of flagged content."""
        logger.debug("AI deciding on visualization need")

        analysis_result = state.analysis_result
        if analysis_result is None:
            return False

        prompt = build_visualization_decision_prompt(
            content=state.content,
            content_type=state.content_type.value,
            concerns=analysis_result.concerns,
            severity=analysis_result.severity.value,
            reason=analysis_result.detailed_reason,
        )

        # Same provider as the analysis when that was Gemini, otherwise the primary
        first = AIProvider.GEMINI if state.ai_provider is AIProvider.GEMINI else PRIMARY_PROVIDER

        for provider in self.clients.ordered(first):
            try:
                client = self.clients.require(provider)
                text = await client.complete(prompt)
                result = VisualizationDecision.model_validate(parse_json_response(text, provider=provider.value))
            except PROVIDER_FAILURES as e:
                logger.warning(f"{provider.value} visualization decision failed: {e}")
                continue
            except Exception as e:
                logger.error(f"Visualization decision failed unexpectedly: {e}", exc_info=True)
                return False

            logger.info(f"Visualization decision: {result.should_generate} - {result.reasoning}")
            return result.should_generate

        logger.error("Visualization decision failed, defaulting to false")
        return False

    async def generate_visualization(self, reasoning: str) -> str | None:
        """Generate an explanatory diagram for the reasoning text.

        Returns:
            Image URL, or None when generation is unavailable or fails
        """
        logger.debug("Creating explanatory image")

        if self.clients.openai is None:
            logger.warning("Image generation unavailable: OpenAI is not configured")
            return None

        try:
            image = await self.clients.openai.generate_image(
                build_visualization_image_prompt(reasoning),
                size=self.image_size,
                quality=self.image_quality,
            )
        except Exception as e:
            logger.error(f"Failed to generate image: {e}", exc_info=True)
            return None

        if not image.url:
            logger.warning("No image URL returned")
            return None

        logger.info("Image generated successfully")
        return image.url
