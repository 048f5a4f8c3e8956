"""Image source helpers for vision providers that need inline image data."""

import base64
import re
from dataclasses import dataclass

import httpx

from contentguard.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"

_DATA_URI_PATTERN = re.compile(r"^data:(image/[^;]+);base64,(.+)$", re.DOTALL)


@dataclass(frozen=True)
class InlineImage:
    """Base64 image payload with its MIME type."""

    data: str
    mime_type: str = DEFAULT_MIME_TYPE


def is_data_uri(source: str) -> bool:
    return source.startswith("data:image")


def is_analyzable_image_source(source: str) -> bool:
    """True for http(s) URLs and ``data:image`` URIs."""
    return source.startswith("http") or is_data_uri(source)


def parse_data_uri(source: str) -> InlineImage:
    match = _DATA_URI_PATTERN.match(source)
    if match:
        return InlineImage(data=match.group(2), mime_type=match.group(1))
    return InlineImage(data=source.split(",", 1)[-1])


async def fetch_image_as_base64(url: str, timeout_seconds: float = 30.0) -> InlineImage:
    """Download an image and base64-encode it.

    Raises:
        httpx.HTTPError: On transport errors or a non-200 response
    """
    async with httpx.AsyncClient(timeout=timeout_seconds, follow_redirects=True) as client:
        response = await client.get(url)

    if response.status_code != 200:
        raise httpx.HTTPStatusError(
            f"Failed to fetch image: {response.status_code}",
            request=response.request,
            response=response,
        )

    mime_type = response.headers.get("content-type", DEFAULT_MIME_TYPE).split(";")[0].strip()
    logger.debug(f"Fetched image ({len(response.content)} bytes, {mime_type})")
    data = base64.b64encode(response.content).decode("ascii")
    return InlineImage(data=data, mime_type=mime_type or DEFAULT_MIME_TYPE)


async def prepare_inline_image(source: str, timeout_seconds: float = 30.0) -> InlineImage:
    """Resolve a URL or data URI into an inline base64 image."""
    if is_data_uri(source):
        return parse_data_uri(source)
    return await fetch_image_as_base64(source, timeout_seconds=timeout_seconds)
