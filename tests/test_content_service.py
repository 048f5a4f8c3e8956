import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import BackgroundTasks
from pydantic import ValidationError

from contentguard.core.enums import AIProvider, AuditLogAction, ContentType, ModerationDecision, SubmissionStatus
from contentguard.core.exception import NotFoundError
from contentguard.modules.content.schemas import SubmitContentRequest
from contentguard.modules.content.service import ContentService
from contentguard.modules.moderation.schemas import ModerationResult

SUBMISSION_ID = uuid.UUID("3f2c1a9e-8d8b-4f51-9a41-0d6f0b1f2a10")


@pytest.fixture
def session():
    db = MagicMock()
    db.rollback = AsyncMock()
    return db


@pytest.fixture
def session_factory(session):
    @asynccontextmanager
    async def factory():
        yield session

    return factory


@pytest.fixture
def repos():
    submission_repo = MagicMock()
    submission_repo.create_submission = AsyncMock(return_value=SimpleNamespace(id=SUBMISSION_ID))
    submission_repo.update_decision = AsyncMock()
    submission_repo.get = AsyncMock(return_value=None)
    audit_repo = MagicMock()
    audit_repo.log_action = AsyncMock()

    with (
        patch("contentguard.modules.content.service.SubmissionRepository", return_value=submission_repo),
        patch("contentguard.modules.content.service.AuditLogRepository", return_value=audit_repo),
    ):
        yield submission_repo, audit_repo


@pytest.fixture
def moderation_service():
    service = MagicMock()
    service.moderate_content = AsyncMock(
        return_value=ModerationResult(
            decision=ModerationDecision.FLAGGED,
            reasoning="Needs review",
            ai_provider=AIProvider.GEMINI,
        )
    )
    return service


@pytest.fixture
def content_service(session, session_factory, moderation_service, repos) -> ContentService:
    return ContentService(session, moderation_service, session_factory=session_factory)


def text_request(**overrides) -> SubmitContentRequest:
    data = {"content_type": "text", "content_text": "hello world"} | overrides
    return SubmitContentRequest.model_validate(data)


async def test_submit_creates_pending_submission_and_schedules_moderation(content_service, repos):
    submission_repo, audit_repo = repos
    background_tasks = BackgroundTasks()

    response = await content_service.submit_content("user-1", text_request(), background_tasks)

    assert response.submission_id == SUBMISSION_ID
    assert response.status is SubmissionStatus.PENDING
    assert response.message == "Content submitted for moderation"
    submission_repo.create_submission.assert_awaited_once_with(
        user_id="user-1", content_type=ContentType.TEXT, content_text="hello world", content_url=None
    )
    audit_repo.log_action.assert_awaited_once_with(
        SUBMISSION_ID, AuditLogAction.SUBMISSION_CREATED, {"content_type": "text"}
    )
    assert len(background_tasks.tasks) == 1
    assert background_tasks.tasks[0].func == content_service.process_moderation


async def test_process_moderation_records_decision(content_service, repos, moderation_service):
    submission_repo, audit_repo = repos
    request = text_request(ai_provider="gemini")

    await content_service.process_moderation(SUBMISSION_ID, request)

    moderation_service.moderate_content.assert_awaited_once_with("hello world", ContentType.TEXT, AIProvider.GEMINI)
    status, ai_decision = submission_repo.update_decision.await_args.args[1:]
    assert status is SubmissionStatus.FLAGGED
    assert ai_decision["decision"] == "flagged"
    assert ai_decision["ai_provider"] == "gemini"
    audit_repo.log_action.assert_awaited_once_with(
        SUBMISSION_ID,
        AuditLogAction.MODERATION_COMPLETED,
        {"decision": "flagged", "reasoning": "Needs review"},
    )


async def test_process_moderation_failure_leaves_status_and_audits(content_service, repos, moderation_service, session):
    submission_repo, audit_repo = repos
    moderation_service.moderate_content.side_effect = RuntimeError("providers down")

    await content_service.process_moderation(SUBMISSION_ID, text_request())

    submission_repo.update_decision.assert_not_awaited()
    session.rollback.assert_awaited_once()
    audit_repo.log_action.assert_awaited_once_with(
        SUBMISSION_ID, AuditLogAction.MODERATION_ERROR, {"error": "providers down"}
    )


async def test_process_moderation_survives_audit_failure(content_service, repos, moderation_service):
    _, audit_repo = repos
    moderation_service.moderate_content.side_effect = RuntimeError("providers down")
    audit_repo.log_action.side_effect = RuntimeError("database down")

    await content_service.process_moderation(SUBMISSION_ID, text_request())


async def test_image_submissions_moderate_the_url(content_service, moderation_service):
    request = SubmitContentRequest(content_type=ContentType.IMAGE, content_url="https://cdn.example/a.png")

    await content_service.process_moderation(SUBMISSION_ID, request)

    moderation_service.moderate_content.assert_awaited_once_with(
        "https://cdn.example/a.png", ContentType.IMAGE, None
    )


async def test_get_submission_status(content_service, repos):
    submission_repo, _ = repos
    now = datetime.now(tz=UTC)
    submission_repo.get.return_value = SimpleNamespace(
        id=SUBMISSION_ID,
        user_id="user-1",
        status=SubmissionStatus.APPROVED,
        content_type=ContentType.TEXT,
        ai_decision={"decision": "approved"},
        created_at=now,
        updated_at=now,
    )

    response = await content_service.get_submission_status("user-1", SUBMISSION_ID)

    assert response.id == SUBMISSION_ID
    assert response.status is SubmissionStatus.APPROVED
    assert response.ai_decision == {"decision": "approved"}


async def test_get_unknown_submission_raises(content_service):
    with pytest.raises(NotFoundError):
        await content_service.get_submission_status("user-1", uuid.uuid4())


async def test_other_users_submission_is_not_found(content_service, repos):
    submission_repo, _ = repos
    submission_repo.get.return_value = SimpleNamespace(id=SUBMISSION_ID, user_id="user-2")

    with pytest.raises(NotFoundError):
        await content_service.get_submission_status("user-1", SUBMISSION_ID)


@pytest.mark.parametrize(
    "data",
    [
        {"content_type": "text"},
        {"content_type": "text", "content_text": "   "},
        {"content_type": "text", "content_text": "x" * 10001},
        {"content_type": "image"},
        {"content_type": "image", "content_url": "ftp://example.com/a.png"},
        {"content_type": "image", "content_url": "data:text/plain;base64,aGk="},
        {"content_type": "video", "content_text": "hello"},
        {"content_type": "text", "content_text": "hello", "ai_provider": "claude"},
    ],
)
def test_invalid_submissions_are_rejected(data):
    with pytest.raises(ValidationError):
        SubmitContentRequest.model_validate(data)


@pytest.mark.parametrize(
    "url",
    ["https://cdn.example/a.png", "http://cdn.example/a.png", "data:image/png;base64,aGVsbG8="],
)
def test_valid_image_sources(url):
    assert SubmitContentRequest.model_validate({"content_type": "image", "content_url": url}).content == url
