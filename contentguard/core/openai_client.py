"""OpenAI client for text, vision and image-generation calls."""

import asyncio
from dataclasses import dataclass

from openai import AsyncOpenAI

from contentguard.core.exception import ProviderError, ProviderTimeoutError
from contentguard.core.logging import get_logger

logger = get_logger(__name__)

PROVIDER_NAME = "openai"


@dataclass(frozen=True)
class GeneratedImage:
    url: str | None
    revised_prompt: str | None = None


class OpenAIClient:
    """Thin async wrapper around the OpenAI SDK.

    Every call is bounded by ``timeout_seconds``; SDK errors and timeouts surface as
    ``ProviderError`` subclasses so callers can fail over uniformly.
    """

    def __init__(
        self,
        api_key: str,
        text_model: str,
        vision_model: str,
        image_model: str,
        timeout_seconds: float = 60.0,
    ):
        self.client = AsyncOpenAI(api_key=api_key)
        self.text_model = text_model
        self.vision_model = vision_model
        self.image_model = image_model
        self.timeout_seconds = timeout_seconds
        logger.info(
            f"OpenAI client initialized (text: {text_model}, vision: {vision_model}, image: {image_model})"
        )

    async def _bounded(self, coro, operation: str):
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout_seconds)
        except TimeoutError as e:
            logger.error(f"OpenAI {operation} timed out after {self.timeout_seconds}s")
            raise ProviderTimeoutError(
                f"OpenAI {operation} exceeded {self.timeout_seconds}s", provider=PROVIDER_NAME
            ) from e

    async def _chat(self, model: str, content, max_tokens: int | None = None) -> str:
        kwargs: dict = {
            "model": model,
            "messages": [{"role": "user", "content": content}],
            "temperature": 0,
        }
        if max_tokens:
            kwargs["max_tokens"] = max_tokens

        try:
            response = await self._bounded(self.client.chat.completions.create(**kwargs), "chat completion")
        except ProviderError:
            raise
        except Exception as e:
            logger.error(f"OpenAI API error (model: {model}): {e}")
            raise ProviderError(f"OpenAI API error: {e}", provider=PROVIDER_NAME) from e

        if not response.choices:
            raise ProviderError("No choices returned from OpenAI API", provider=PROVIDER_NAME)

        text = response.choices[0].message.content or ""
        logger.debug(f"OpenAI response received (model: {model}, length: {len(text)})")
        return text.strip()

    async def complete(self, prompt: str) -> str:
        """Generate a text completion with the text model."""
        return await self._chat(self.text_model, prompt)

    async def complete_with_image(self, prompt: str, image_url: str) -> str:
        """Generate a completion for a prompt plus an image URL or data URI."""
        content = [
            {"type": "text", "text": prompt},
            {"type": "image_url", "image_url": {"url": image_url, "detail": "high"}},
        ]
        return await self._chat(self.vision_model, content, max_tokens=1000)

    async def generate_image(self, prompt: str, size: str = "1024x1024", quality: str = "standard") -> GeneratedImage:
        """Generate one image and return its URL.

        Unlike the completion calls, SDK errors are re-raised unchanged so callers can
        inspect ``code``/``status_code`` of the OpenAI error.
        """
        response = await self._bounded(
            self.client.images.generate(
                model=self.image_model,
                prompt=prompt,
                n=1,
                size=size,
                quality=quality,
                response_format="url",
            ),
            "image generation",
        )

        if not response.data:
            return GeneratedImage(url=None)

        image = response.data[0]
        return GeneratedImage(url=image.url, revised_prompt=getattr(image, "revised_prompt", None))
