from pydantic import BaseModel, ConfigDict, Field

from contentguard.core.config import Settings, settings
from contentguard.core.enums import AIProvider


class ModerationConfig(BaseModel):
    """Immutable configuration a moderation pipeline is built from.

    A pipeline for another preferred provider is built from ``with_provider()``,
    which returns a new config and leaves this one untouched.
    """

    model_config = ConfigDict(frozen=True)

    openai_api_key: str
    gemini_api_key: str | None = None
    preferred_provider: AIProvider = AIProvider.OPENAI

    openai_text_model: str = "gpt-3.5-turbo"
    openai_vision_model: str = "gpt-4o"
    openai_image_model: str = "dall-e-3"
    gemini_model: str = "gemini-2.5-flash"
    gemini_vision_model: str = "gemini-2.5-flash"

    provider_timeout_seconds: float = Field(default=60.0, gt=0)

    @classmethod
    def from_settings(cls, app_settings: Settings = settings) -> "ModerationConfig":
        return cls(
            openai_api_key=app_settings.OPENAI_API_KEY,
            gemini_api_key=app_settings.GEMINI_API_KEY or None,
            preferred_provider=AIProvider(app_settings.AI_PROVIDER.lower()),
            openai_text_model=app_settings.OPENAI_TEXT_MODEL,
            openai_vision_model=app_settings.OPENAI_VISION_MODEL,
            openai_image_model=app_settings.OPENAI_IMAGE_MODEL,
            gemini_model=app_settings.GEMINI_MODEL,
            gemini_vision_model=app_settings.GEMINI_VISION_MODEL,
            provider_timeout_seconds=app_settings.PROVIDER_TIMEOUT_SECONDS,
        )

    @property
    def gemini_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    def with_provider(self, provider: AIProvider) -> "ModerationConfig":
        return self.model_copy(update={"preferred_provider": provider})
