"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .web import web_router, redirect_router
from .middleware.headers import ForwardedHeadersMiddleware
from .middleware.logging import LoggingMiddleware


def create_app(
    db_instance,
    cache_instance,
    service_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        db_instance: Store instance
        cache_instance: Cache instance
        service_instance: Service instance
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="HTML Link Shortener",
        description="Rewrite the links of HTML email templates to short redirect URLs",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.db = db_instance
    app.state.cache = cache_instance
    app.state.service = service_instance
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last added runs first: forwarded headers are read before the request is logged
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ForwardedHeadersMiddleware)

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])
    app.include_router(redirect_router, prefix=_normalize_prefix(config.path_prefix), tags=["Redirect"])

    return app


def _normalize_prefix(path_prefix: str) -> str:
    prefix = (path_prefix or "").strip().strip("/")
    return "/" + prefix if prefix else ""
