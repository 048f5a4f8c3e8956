import uuid
from typing import Any

from sqlalchemy import Enum, ForeignKey, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from contentguard.core.database import Base
from contentguard.core.enums import AuditLogAction, ContentType, SubmissionStatus


class Submission(Base):
    """A piece of user content and the moderation decision stored for it."""

    __tablename__ = "content_submissions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String, index=True, nullable=False)

    content_type: Mapped[ContentType] = mapped_column(
        Enum(ContentType, name="content_type_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    content_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[SubmissionStatus] = mapped_column(
        Enum(SubmissionStatus, name="submission_status_enum", values_callable=lambda e: [m.value for m in e]),
        default=SubmissionStatus.PENDING,
        index=True,
        nullable=False,
    )
    ai_decision: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    submission_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("content_submissions.id", ondelete="CASCADE"), index=True
    )
    action: Mapped[AuditLogAction] = mapped_column(
        Enum(AuditLogAction, name="audit_log_action_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    details: Mapped[dict[str, Any]] = mapped_column(JSONB, default=dict, nullable=False)
