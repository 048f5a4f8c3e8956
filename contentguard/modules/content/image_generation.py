from functools import lru_cache

from openai import APIStatusError

from contentguard.core.config import settings
from contentguard.core.exception import ConfigurationError, ImageGenerationError, ProviderTimeoutError
from contentguard.core.logging import get_logger
from contentguard.core.openai_client import OpenAIClient
from contentguard.modules.content.schemas import GenerateImageRequest, GenerateImageResponse

logger = get_logger(__name__)

CONTENT_POLICY_MESSAGE = (
    "Your prompt was rejected by OpenAI's safety system. "
    "Please try a different prompt that follows content guidelines."
)
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again in a few moments."


class ImageGenerationService:
    """Text-to-image generation for users, on the same OpenAI client the moderation pipeline uses."""

    def __init__(self, client: OpenAIClient):
        self.client = client

    async def generate_image(self, request: GenerateImageRequest) -> GenerateImageResponse:
        """
        Generate one image from a prompt.

        Raises:
            ImageGenerationError: With a user-facing message; status 429 for provider rate limits
        """
        logger.info(f"Generating image with {self.client.image_model}: '{request.prompt[:50]}...'")

        try:
            image = await self.client.generate_image(request.prompt, size=request.size, quality=request.quality)
        except APIStatusError as e:
            logger.error(f"Failed to generate image: {e}")
            if e.code == "content_policy_violation":
                raise ImageGenerationError(CONTENT_POLICY_MESSAGE, status_code=400) from e
            if e.status_code == 429:
                raise ImageGenerationError(RATE_LIMIT_MESSAGE, status_code=429) from e
            raise ImageGenerationError(f"Image generation failed: {e.message}") from e
        except ProviderTimeoutError as e:
            raise ImageGenerationError(e.message, status_code=504) from e

        if not image.url:
            raise ImageGenerationError("No image URL returned from the image model")

        logger.info("Image generated successfully")
        return GenerateImageResponse(image_url=image.url, revised_prompt=image.revised_prompt)


@lru_cache
def get_image_generation_service() -> ImageGenerationService:
    if not settings.OPENAI_API_KEY:
        raise ConfigurationError("OpenAI API key is required for image generation")

    return ImageGenerationService(
        OpenAIClient(
            api_key=settings.OPENAI_API_KEY,
            text_model=settings.OPENAI_TEXT_MODEL,
            vision_model=settings.OPENAI_VISION_MODEL,
            image_model=settings.OPENAI_IMAGE_MODEL,
            timeout_seconds=settings.PROVIDER_TIMEOUT_SECONDS,
        )
    )
