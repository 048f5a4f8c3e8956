from dataclasses import dataclass

import httpx

from contentguard.core.enums import AIProvider
from contentguard.core.exception import ProviderError, ProviderUnavailableError
from contentguard.core.gemini_client import GeminiClient
from contentguard.core.logging import get_logger
from contentguard.core.openai_client import OpenAIClient
from contentguard.modules.moderation.config import ModerationConfig

logger = get_logger(__name__)

# Failures that make a provider unusable for one call: SDK errors and timeouts (wrapped as
# ProviderError), image download errors, and malformed or schema-invalid completions
# (JSON and pydantic validation errors are ValueErrors).
PROVIDER_FAILURES = (ProviderError, httpx.HTTPError, ValueError)


@dataclass(frozen=True)
class ProviderClients:
    """The provider clients one pipeline talks to. Gemini is optional."""

    openai: OpenAIClient | None
    gemini: GeminiClient | None = None

    @classmethod
    def from_config(cls, config: ModerationConfig) -> "ProviderClients":
        openai_client = OpenAIClient(
            api_key=config.openai_api_key,
            text_model=config.openai_text_model,
            vision_model=config.openai_vision_model,
            image_model=config.openai_image_model,
            timeout_seconds=config.provider_timeout_seconds,
        )

        gemini_client = None
        if config.gemini_enabled:
            gemini_client = GeminiClient(
                api_key=config.gemini_api_key,
                model=config.gemini_model,
                vision_model=config.gemini_vision_model,
                timeout_seconds=config.provider_timeout_seconds,
            )
        else:
            logger.warning("Gemini API key not provided, using OpenAI only")

        return cls(openai=openai_client, gemini=gemini_client)

    def is_available(self, provider: AIProvider) -> bool:
        return self.get(provider) is not None

    def get(self, provider: AIProvider):
        return self.openai if provider is AIProvider.OPENAI else self.gemini

    def require(self, provider: AIProvider):
        client = self.get(provider)
        if client is None:
            raise ProviderUnavailableError(f"{provider.value} is not configured", provider=provider.value)
        return client

    def ordered(self, preferred: AIProvider) -> list[AIProvider]:
        """Configured providers, preferred first."""
        return [provider for provider in (preferred, preferred.alternate) if self.is_available(provider)]
