"""Core enums used across the application."""

from enum import Enum as PyEnum


class AIProvider(str, PyEnum):
    """External AI providers. OpenAI is the primary provider, Gemini the secondary."""

    OPENAI = "openai"
    GEMINI = "gemini"

    @property
    def alternate(self) -> "AIProvider":
        return AIProvider.GEMINI if self is AIProvider.OPENAI else AIProvider.OPENAI


PRIMARY_PROVIDER = AIProvider.OPENAI


class ContentType(str, PyEnum):
    TEXT = "text"
    IMAGE = "image"


class Severity(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ContentClassification(str, PyEnum):
    SAFE = "safe"
    FLAGGED = "flagged"
    HARMFUL = "harmful"


class ModerationDecision(str, PyEnum):
    APPROVED = "approved"
    FLAGGED = "flagged"
    REJECTED = "rejected"


class SubmissionStatus(str, PyEnum):
    PENDING = "pending"
    APPROVED = "approved"
    FLAGGED = "flagged"
    REJECTED = "rejected"


class AuditLogAction(str, PyEnum):
    SUBMISSION_CREATED = "submission_created"
    MODERATION_COMPLETED = "moderation_completed"
    MODERATION_ERROR = "moderation_error"
