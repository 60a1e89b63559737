#!/usr/bin/env python3
"""
Main entry point for the HTML link shortener service.

Concurrency: requests are served with async I/O (FastAPI + asyncpg pool +
redis.asyncio); HTML parsing runs in worker threads. Set WORKERS > 1 for
multi-process scaling (each worker has its own DB pool).

Usage:
    python app.py

Environment variables:
    DATABASE_URL - Store URL (questdb://... or memory://)
    QUESTDB_CREATE_TABLES - Set to '1' to enable table creation
    REDIS_URL - Redis connection URL (optional)
    BASE_URL - Fallback base URL for short links
    PATH_PREFIX - Redirect path prefix (default /r)
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from shortlinks.database import URLShortenerQuestDB, create_store
from shortlinks.database.cache import RedisCache
from shortlinks.service import HTMLShortenerService
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the store, cache and service on startup; close them on shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting HTML link shortener service...")

    logger.info(f"Connecting to store at {config.database_url}")
    db = create_store(config.database_url, logger=logger)
    if isinstance(db, URLShortenerQuestDB):
        await db.ensure_tables()

    cache = None
    if config.redis_url:
        logger.info(f"Connecting to Redis at {config.redis_url}")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")

    service = HTMLShortenerService(
        db=db,
        cache=cache,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=logger,
        path_prefix=config.path_prefix,
        max_collision_retries=config.max_collision_retries,
    )

    app.state.db = db
    app.state.cache = cache
    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down HTML link shortener service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("HTML Link Shortener Service")
    logger.info(f"Configuration: {config.model_dump()}")

    app = create_app(
        db_instance=None,  # set in lifespan
        cache_instance=None,
        service_instance=None,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
