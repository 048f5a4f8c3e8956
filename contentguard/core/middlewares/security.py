from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)

DOCS_PATHS = ("/api/docs", "/api/redoc")

DOCS_CSP = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https:; "
    "connect-src 'self'; "
    "frame-ancestors 'none';"
)

# Moderation responses link to provider-hosted visualization images
API_CSP = "default-src 'self'; img-src 'self' data: https:; frame-ancestors 'none';"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Content-Security-Policy"] = DOCS_CSP if request.url.path in DOCS_PATHS else API_CSP
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


class MaxRequestSizeMiddleware(BaseHTTPMiddleware):
    """Reject POST bodies larger than ``max_upload_size`` bytes.

    Image submissions may carry a base64 data URI inline, so the limit sits well above
    what text submissions need.
    """

    def __init__(self, app, max_upload_size: int = 8 * 1024 * 1024):
        super().__init__(app)
        self.max_upload_size: int = max_upload_size

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "POST":
            content_length: str | None = request.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > self.max_upload_size:
                return JSONResponse(
                    status_code=status.HTTP_413_CONTENT_TOO_LARGE,
                    content={
                        "type": "RequestTooLarge",
                        "error": f"Request body exceeds the maximum limit of {self.max_upload_size} bytes.",
                    },
                    headers={"X-Error": "RequestTooLarge"},
                )

        return await call_next(request)
