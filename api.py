import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress
from typing import Any

import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware import Middleware
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from contentguard.core.config import settings
from contentguard.core.database import create_tables
from contentguard.core.exception import ConfigurationError
from contentguard.core.handler import init as init_exception_handlers
from contentguard.core.logging import configure_logging, get_logger
from contentguard.core.middlewares.logging import LoggingMiddleware
from contentguard.core.middlewares.security import MaxRequestSizeMiddleware, SecurityHeadersMiddleware
from contentguard.core.services.redis_service import redis_service
from contentguard.modules.content.router import router as content_router
from contentguard.modules.moderation.dependencies import get_moderation_service
from contentguard.modules.monitoring.router import router as monitoring_router

configure_logging()
logger = get_logger(__name__)

docs_enabled: bool = settings.ENABLE_DOCS and not settings.is_production


middleware_list: list[Middleware] = [
    Middleware(SecurityHeadersMiddleware),
    Middleware(MaxRequestSizeMiddleware, max_upload_size=8 * 1024 * 1024),
    Middleware(LoggingMiddleware),
]

if settings.BACKEND_CORS_ORIGINS:
    middleware_list.insert(
        0,
        Middleware(
            CORSMiddleware,
            allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        ),
    )

openapi_tags = [
    {
        "name": "Content",
        "description": (
            "Submit text or image content for AI moderation and poll the decision. "
            "Rate limits: 5 submissions/minute, 30 status checks/minute, 10 image generations/minute per user."
        ),
    },
    {"name": "Monitoring", "description": "Health, readiness and performance metrics"},
]


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """
    Application lifespan events.

    Startup:
        - Create missing tables outside production
        - Build the moderation service (fails fast without an OpenAI key)
        - Start periodic performance stats logging

    Shutdown:
        - Stop stats logging and close the Redis connection
    """
    logger.info("Application startup: Initializing resources...")

    if not settings.is_production:
        await create_tables()

    stats_task: asyncio.Task | None = None
    try:
        moderation_service = get_moderation_service()
        stats_task = asyncio.create_task(moderation_service.run_stats_logger())
    except ConfigurationError as e:
        logger.error(f"Moderation service unavailable: {e.message}")

    yield

    logger.info("Application shutdown: Cleaning up resources...")

    if stats_task is not None:
        stats_task.cancel()
        with suppress(asyncio.CancelledError):
            await stats_task

    await redis_service.close()


def custom_openapi() -> dict[str, Any]:
    """Custom OpenAPI schema with Bearer authentication support."""
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
        tags=app.openapi_tags,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "JWT issued by the identity provider; the `sub` claim is the user id",
        }
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="AI content moderation API",
    version="1.0",
    middleware=middleware_list,
    openapi_tags=openapi_tags,
    lifespan=lifespan,
    docs_url="/api/docs" if docs_enabled else None,
    redoc_url="/api/redoc" if docs_enabled else None,
    openapi_url="/api/openapi.json" if docs_enabled else None,
)

app.openapi = custom_openapi

init_exception_handlers(app)

api_v1_router = APIRouter(prefix=settings.API_V1_STR)
api_v1_router.include_router(router=content_router, prefix="/content", tags=["Content"])
api_v1_router.include_router(router=monitoring_router, prefix="/monitoring", tags=["Monitoring"])

app.include_router(api_v1_router)


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8000)
