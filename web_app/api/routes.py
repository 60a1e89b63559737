"""API routes implementation."""

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile, status

from .schemas import (
    ErrorResponse,
    ExtractRequest,
    ExtractResponse,
    HealthResponse,
    ShortenRequest,
    ShortenResponse,
    StatisticsResponse,
    URLInfoResponse,
)
from shortlinks.common.headers import build_base_url
from shortlinks.common.validators import is_valid_url
from shortlinks.errors import MalformedInputError

router = APIRouter()
logger = logging.getLogger("html_shortener.api")

SHORTEN_RESPONSES = {
    400: {"model": ErrorResponse, "description": "HTML could not be parsed"},
    413: {"model": ErrorResponse, "description": "HTML template too large"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def _check_size(html: Union[str, bytes], limit: int) -> None:
    size = len(html) if isinstance(html, bytes) else len(html.encode("utf-8", errors="replace"))
    if size > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"HTML template is {size} bytes (max {limit})",
        )


def _resolve_base_url(request: Request, override: Optional[str]) -> str:
    if override:
        return override.rstrip("/")
    return build_base_url(
        headers=dict(request.headers),
        fallback_base_url=request.app.state.config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )


async def _shorten(request: Request, html: Union[str, bytes], base_url: Optional[str]) -> ShortenResponse:
    service = request.app.state.service
    _check_size(html, request.app.state.config.max_html_bytes)

    try:
        result = await service.shorten_html(html, _resolve_base_url(request, base_url))
    except MalformedInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception(f"Error shortening HTML: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal error: {str(e)}",
        )

    return ShortenResponse(**result.to_dict())


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses=SHORTEN_RESPONSES,
    summary="Shorten the links of an HTML template",
    description="Replace every http(s) URL in link attributes with a short redirect URL.",
)
async def shorten_html(request: Request, body: ShortenRequest):
    """Shorten the links of an HTML template sent as JSON."""
    return await _shorten(request, body.html_content, body.base_url)


@router.post(
    "/shorten/upload",
    response_model=ShortenResponse,
    responses=SHORTEN_RESPONSES,
    summary="Shorten the links of an uploaded HTML file",
)
async def shorten_html_upload(
    request: Request,
    file: UploadFile = File(..., description="HTML template (UTF-8)"),
    base_url: Optional[str] = Form(None),
):
    """Shorten the links of an uploaded HTML template."""
    if base_url:
        is_valid, error = is_valid_url(base_url)
        if not is_valid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid base_url: {error}",
            )

    content = await file.read()
    if not content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty",
        )

    return await _shorten(request, content, base_url)


@router.post(
    "/extract",
    response_model=ExtractResponse,
    responses={400: {"model": ErrorResponse, "description": "HTML could not be parsed"}},
    summary="List shortenable URLs",
    description="Return the URLs that /shorten would replace, without creating codes.",
)
async def extract_urls(request: Request, body: ExtractRequest):
    """List the eligible URLs of an HTML template."""
    service = request.app.state.service
    _check_size(body.html_content, request.app.state.config.max_html_bytes)

    try:
        urls = await service.extract(body.html_content)
    except MalformedInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ExtractResponse(urls=urls, count=len(urls))


@router.get(
    "/urls/{short_code}",
    response_model=URLInfoResponse,
    responses={404: {"model": ErrorResponse, "description": "Short code not found"}},
    summary="Get short URL information",
)
async def get_url_info(request: Request, short_code: str):
    """Get the stored mapping of a short code."""
    service = request.app.state.service

    info = await service.get_url_info(short_code)

    if not info:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{short_code}' not found",
        )

    return URLInfoResponse(**info)


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    stats = await request.app.state.service.get_statistics()
    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check(request: Request):
    """Detailed health check."""
    health = await request.app.state.service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
