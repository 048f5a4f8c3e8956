import uuid

from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from contentguard.core.database import AsyncSessionLocal
from contentguard.core.enums import AuditLogAction, ModerationDecision, SubmissionStatus
from contentguard.core.exception import NotFoundError
from contentguard.core.logging import get_logger
from contentguard.modules.content.repository import AuditLogRepository, SubmissionRepository
from contentguard.modules.content.schemas import (
    SubmissionResponse,
    SubmitContentRequest,
    SubmitResponse,
)
from contentguard.modules.moderation.service import ModerationService

logger = get_logger(__name__)

STATUS_BY_DECISION: dict[ModerationDecision, SubmissionStatus] = {
    ModerationDecision.APPROVED: SubmissionStatus.APPROVED,
    ModerationDecision.FLAGGED: SubmissionStatus.FLAGGED,
    ModerationDecision.REJECTED: SubmissionStatus.REJECTED,
}


class ContentService:
    def __init__(
        self,
        db: AsyncSession,
        moderation_service: ModerationService,
        session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal,
    ):
        self.db = db
        self.moderation_service = moderation_service
        self.session_factory = session_factory
        self.submission_repo = SubmissionRepository(db)
        self.audit_repo = AuditLogRepository(db)

    async def submit_content(
        self,
        user_id: str,
        request: SubmitContentRequest,
        background_tasks: BackgroundTasks,
    ) -> SubmitResponse:
        """Store a pending submission and schedule its moderation after the response is sent."""
        logger.info(
            f"Submitting {request.content_type.value} content for user {user_id} "
            f"(AI provider: {request.ai_provider.value if request.ai_provider else 'default'})"
        )

        submission = await self.submission_repo.create_submission(
            user_id=user_id,
            content_type=request.content_type,
            content_text=request.content_text,
            content_url=request.content_url,
        )
        await self.audit_repo.log_action(
            submission.id,
            AuditLogAction.SUBMISSION_CREATED,
            {"content_type": request.content_type.value},
        )

        background_tasks.add_task(self.process_moderation, submission.id, request)

        return SubmitResponse(
            submission_id=submission.id,
            status=SubmissionStatus.PENDING,
            message="Content submitted for moderation",
        )

    async def process_moderation(self, submission_id: uuid.UUID, request: SubmitContentRequest) -> None:
        """Moderate a stored submission and record the outcome.

        Runs outside the request, so it opens its own session. A failed moderation
        leaves the submission pending and records a ``moderation_error`` audit entry.
        """
        logger.info(f"Processing moderation for submission: {submission_id}")

        async with self.session_factory() as session:
            submission_repo = SubmissionRepository(session)
            audit_repo = AuditLogRepository(session)

            try:
                result = await self.moderation_service.moderate_content(
                    request.content, request.content_type, request.ai_provider
                )
                status = STATUS_BY_DECISION[result.decision]

                await submission_repo.update_decision(
                    submission_id, status, result.model_dump(mode="json", exclude_none=True)
                )
                await audit_repo.log_action(
                    submission_id,
                    AuditLogAction.MODERATION_COMPLETED,
                    {"decision": result.decision.value, "reasoning": result.reasoning},
                )
                logger.info(f"Moderation completed for {submission_id}: {result.decision.value}")
            except Exception as e:
                logger.error(f"Moderation error for {submission_id}: {e}", exc_info=True)
                await session.rollback()
                try:
                    await audit_repo.log_action(submission_id, AuditLogAction.MODERATION_ERROR, {"error": str(e)})
                except Exception as audit_error:
                    logger.error(f"Failed to record moderation error for {submission_id}: {audit_error}")

    async def get_submission_status(self, user_id: str, submission_id: uuid.UUID) -> SubmissionResponse:
        """Return a submission owned by ``user_id``; other users' submissions read as not found."""
        submission = await self.submission_repo.get(submission_id)
        if submission is None or submission.user_id != user_id:
            raise NotFoundError(f"Submission with ID {submission_id} not found")

        return SubmissionResponse.model_validate(submission)
