"""Redirect and load balancer routes."""

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from shortlinks.common.validators import is_valid_short_code

router = APIRouter()
redirect_router = APIRouter()


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    health = await request.app.state.service.health_check()

    if not health["overall"]:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unhealthy",
        )
    return {"status": "healthy"}


@redirect_router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Permanently redirect a short code to its original URL."""
    is_valid, _ = is_valid_short_code(short_code)
    original_url = None
    if is_valid:
        # also counts the access
        original_url = await request.app.state.service.get_original_url(short_code, increment_count=True)

    if not original_url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{short_code}' not found",
        )

    return RedirectResponse(url=original_url, status_code=status.HTTP_301_MOVED_PERMANENTLY)
