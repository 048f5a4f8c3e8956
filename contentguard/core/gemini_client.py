"""Gemini AI client for text and vision completions."""

import asyncio
import base64

from google import genai
from google.genai import types

from contentguard.core.exception import ProviderError, ProviderTimeoutError
from contentguard.core.logging import get_logger
from contentguard.core.utils.image import InlineImage

logger = get_logger(__name__)

PROVIDER_NAME = "gemini"


class GeminiClient:
    """Gemini AI client with separate text and vision models."""

    def __init__(
        self,
        api_key: str,
        model: str,
        vision_model: str | None = None,
        timeout_seconds: float = 60.0,
    ):
        """Initialize Gemini client with API key."""
        self.client = genai.Client(api_key=api_key)
        self.model = model
        self.vision_model = vision_model or model
        self.timeout_seconds = timeout_seconds
        logger.info(f"Gemini client initialized (text: {self.model}, vision: {self.vision_model})")

    async def _generate(self, model_name: str, contents) -> str:
        try:
            logger.debug(f"Calling Gemini API (model: {model_name})")

            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=model_name,
                    contents=contents,
                    config=types.GenerateContentConfig(temperature=0.0, candidate_count=1),
                ),
                timeout=self.timeout_seconds,
            )

            if not response:
                raise ProviderError("No response received from Gemini API", provider=PROVIDER_NAME)

            # The SDK can return response objects with errors embedded
            try:
                text = response.text
            except AttributeError as e:
                logger.error(f"Invalid response structure from Gemini API: {response}")
                raise ProviderError(f"Invalid Gemini API response structure: {e}", provider=PROVIDER_NAME) from e

            if not text:
                raise ProviderError("Empty response text from Gemini API", provider=PROVIDER_NAME)

            logger.debug(f"Gemini API response received (length: {len(text)})")
            return text.strip()

        except TimeoutError as e:
            logger.error(f"Gemini API timed out after {self.timeout_seconds}s (model: {model_name})")
            raise ProviderTimeoutError(
                f"Gemini call exceeded {self.timeout_seconds}s", provider=PROVIDER_NAME
            ) from e
        except ProviderError:
            raise
        except Exception as e:
            logger.error(f"Gemini API error (model: {model_name}): {e}")
            raise ProviderError(f"Gemini API error: {e}", provider=PROVIDER_NAME) from e

    async def complete(self, prompt: str) -> str:
        """
        Generate a text completion.

        Args:
            prompt: The prompt to send to Gemini

        Returns:
            Generated text response

        Raises:
            ProviderError: If the Gemini API call fails or times out
        """
        return await self._generate(self.model, prompt)

    async def complete_with_image(self, prompt: str, image: InlineImage) -> str:
        """Generate a completion for a prompt plus an inline base64 image."""
        image_part = types.Part.from_bytes(data=base64.b64decode(image.data), mime_type=image.mime_type)
        return await self._generate(self.vision_model, [prompt, image_part])
