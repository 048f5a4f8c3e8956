import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from contentguard.core.database import get_db
from contentguard.core.logging import get_logger
from contentguard.core.middlewares.ratelimit import (
    rate_limit_image_generation,
    rate_limit_status,
    rate_limit_submit,
)
from contentguard.modules.auth.dependencies import get_current_user_id
from contentguard.modules.content.image_generation import ImageGenerationService, get_image_generation_service
from contentguard.modules.content.schemas import (
    GenerateImageRequest,
    GenerateImageResponse,
    SubmissionResponse,
    SubmitContentRequest,
    SubmitResponse,
)
from contentguard.modules.content.service import ContentService
from contentguard.modules.moderation.dependencies import get_moderation_service
from contentguard.modules.moderation.service import ModerationService

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user_id)])


def get_content_service(
    db: AsyncSession = Depends(get_db),
    moderation_service: ModerationService = Depends(get_moderation_service),
) -> ContentService:
    return ContentService(db, moderation_service)


@router.post(
    "/submit",
    response_model=SubmitResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit_submit)],
)
async def submit_content(
    request: SubmitContentRequest,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
    service: ContentService = Depends(get_content_service),
):
    return await service.submit_content(user_id, request, background_tasks)


@router.get(
    "/status/{submission_id}",
    response_model=SubmissionResponse,
    dependencies=[Depends(rate_limit_status)],
)
async def get_status(
    submission_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    service: ContentService = Depends(get_content_service),
):
    logger.info(f"User {user_id} checking status for submission: {submission_id}")
    return await service.get_submission_status(user_id, submission_id)


@router.post(
    "/generate-image",
    response_model=GenerateImageResponse,
    dependencies=[Depends(rate_limit_image_generation)],
)
async def generate_image(
    request: GenerateImageRequest,
    service: ImageGenerationService = Depends(get_image_generation_service),
):
    return await service.generate_image(request)
