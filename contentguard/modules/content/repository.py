import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from contentguard.core.enums import AuditLogAction, ContentType, SubmissionStatus
from contentguard.core.logging import get_logger
from contentguard.core.repository import BaseRepository
from contentguard.modules.content.models import AuditLog, Submission

logger = get_logger(__name__)


class SubmissionRepository(BaseRepository[Submission]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Submission)

    async def create_submission(
        self,
        user_id: str,
        content_type: ContentType,
        content_text: str | None = None,
        content_url: str | None = None,
    ) -> Submission:
        submission = Submission(
            user_id=user_id,
            content_type=content_type,
            content_text=content_text,
            content_url=content_url,
            status=SubmissionStatus.PENDING,
        )
        submission = await self.create(submission)
        logger.info(f"Submission created: {submission.id}")
        return submission

    async def update_decision(
        self,
        submission_id: uuid.UUID,
        status: SubmissionStatus,
        ai_decision: dict[str, Any],
    ) -> Submission | None:
        submission = await self.get(submission_id)
        if submission is None:
            return None

        submission = await self.update(submission, {"status": status, "ai_decision": ai_decision})
        logger.info(f"Submission updated: {submission_id} - Status: {status.value}")
        return submission


class AuditLogRepository(BaseRepository[AuditLog]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, AuditLog)

    async def log_action(
        self,
        submission_id: uuid.UUID,
        action: AuditLogAction,
        details: dict[str, Any] | None = None,
    ) -> AuditLog:
        return await self.create(AuditLog(submission_id=submission_id, action=action, details=details or {}))
