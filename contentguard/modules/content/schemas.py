import re
import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import Field, model_validator

from contentguard.core.config import settings
from contentguard.core.enums import AIProvider, ContentType, SubmissionStatus
from contentguard.core.schema import BaseSchema

CONTENT_URL_PATTERN = re.compile(r"^(https?://.+|data:image/.+;base64,.+)$")


class SubmitContentRequest(BaseSchema):
    content_type: ContentType
    content_text: str | None = None
    content_url: str | None = None
    ai_provider: AIProvider | None = None

    @model_validator(mode="after")
    def validate_content(self) -> "SubmitContentRequest":
        if self.content_type is ContentType.TEXT:
            if not self.content_text or not self.content_text.strip():
                raise ValueError("Content text is required for text submissions")
            if len(self.content_text) > settings.MAX_TEXT_LENGTH:
                raise ValueError(f"Text content cannot exceed {settings.MAX_TEXT_LENGTH} characters")
        else:
            if not self.content_url:
                raise ValueError("Content URL is required for image submissions")
            if not CONTENT_URL_PATTERN.match(self.content_url):
                raise ValueError("Content URL must be a valid URL (http/https) or base64 data URL (data:image/...)")
        return self

    @property
    def content(self) -> str:
        return self.content_text or self.content_url or ""


class SubmitResponse(BaseSchema):
    submission_id: uuid.UUID
    status: SubmissionStatus
    message: str


class SubmissionResponse(BaseSchema):
    id: uuid.UUID
    status: SubmissionStatus
    content_type: ContentType
    ai_decision: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime


class GenerateImageRequest(BaseSchema):
    prompt: str = Field(..., min_length=1, max_length=1000)
    size: Literal["1024x1024", "1792x1024", "1024x1792"] = "1024x1024"
    quality: Literal["standard", "hd"] = "standard"


class GenerateImageResponse(BaseSchema):
    image_url: str
    revised_prompt: str | None = None
