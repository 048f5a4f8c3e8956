from logging import Logger
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from jwt import ExpiredSignatureError, InvalidTokenError

from contentguard.core.exception import (
    BaseAppError,
    ConfigurationError,
    ImageGenerationError,
    NotFoundError,
)
from contentguard.core.logging import get_logger

logger: Logger = get_logger(__name__)


def init(app: FastAPI):
    def _result(status_code: int, detail: Any, _type: str = "Error", headers: dict | None = None):
        logger.debug(f"{status_code} {_type}: {detail}")
        content = {
            "type": _type,
            "error": detail,
        }
        return JSONResponse(
            status_code=status_code,
            content=content,
            headers=headers or {"X-Error": _type},
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(_request: Request, exc: HTTPException):
        return _result(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError):
        messages = [error.get("msg", "Validation error") for error in exc.errors()]
        return _result(status.HTTP_422_UNPROCESSABLE_CONTENT, "; ".join(messages), "ValidationError")

    @app.exception_handler(ExpiredSignatureError)
    async def jwt_expired_handler(_request: Request, _exc: ExpiredSignatureError):
        return _result(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Your session has expired. Please log in again.",
            _type="AuthenticationError",
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(InvalidTokenError)
    async def jwt_invalid_handler(_request: Request, _exc: InvalidTokenError):
        return _result(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token. Please log in again.",
            _type="AuthenticationError",
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_request: Request, exc: NotFoundError):
        return _result(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message, _type="NotFoundError")

    @app.exception_handler(ImageGenerationError)
    async def image_generation_handler(_request: Request, exc: ImageGenerationError):
        return _result(status_code=exc.status_code, detail=exc.message, _type="ImageGenerationError")

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(_request: Request, exc: ConfigurationError):
        logger.error(f"Configuration error: {exc.message}")
        return _result(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is not configured",
            _type="ConfigurationError",
        )

    @app.exception_handler(BaseAppError)
    async def app_exception_handler(_request: Request, exc: BaseAppError):
        logger.debug(f"BaseAppError handler caught: {type(exc).__name__} - {exc.message}")
        return _result(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message, _type=exc.__class__.__name__)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {exc!s}",
            exc_info=True,
            extra={
                "request_path": str(request.url.path),
                "request_method": request.method,
                "exception_type": type(exc).__name__,
            },
        )

        return _result(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "InternalServerError")
