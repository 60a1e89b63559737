"""Pytest configuration and fixtures."""

import pytest
from typing import AsyncGenerator

from httpx import ASGITransport, AsyncClient

from config import Config
from shortlinks.database.memory import URLShortenerMemoryDB
from shortlinks.service import HTMLShortenerService
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def test_db(logger) -> AsyncGenerator[URLShortenerMemoryDB, None]:
    """Create in-memory store."""
    db = URLShortenerMemoryDB(logger=logger)
    yield db
    await db.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def service(test_db, short_code_generator, logger) -> HTMLShortenerService:
    """Create service instance."""
    return HTMLShortenerService(
        db=test_db,
        cache=None,
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def config():
    """Create test configuration."""
    return Config(
        database_url="memory://",
        base_url="http://testserver",
        max_html_bytes=10_000,
    )


@pytest.fixture
def app(test_db, service, config):
    """Create test FastAPI app."""
    return create_app(
        db_instance=test_db,
        cache_instance=None,
        service_instance=service,
        config=config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_html():
    """Email template with eligible, repeated and ineligible links."""
    return (
        "<!DOCTYPE html>\n"
        "<html><head>\n"
        '<link rel="stylesheet" href="https://cdn.example.com/email.css">\n'
        '<script src="https://cdn.example.com/track.js"></script>\n'
        "</head><body>\n"
        '<a href="https://example.com/sale">Shop the sale</a>\n'
        '<img src="https://example.com/banner.png" alt="Banner">\n'
        '<a href="https://example.com/sale">Shop again</a>\n'
        '<form action="https://example.com/subscribe" method="post"></form>\n'
        '<div data-url="https://example.com/tracked">tracked</div>\n'
        '<a href="mailto:help@example.com">Email us</a>\n'
        '<a href="tel:+15551234567">Call us</a>\n'
        '<a href="#top">Top</a>\n'
        '<img src="data:image/gif;base64,R0lGODlhAQABAAAAACw=">\n'
        '<a href="/relative/path">Relative</a>\n'
        "</body></html>\n"
    )
