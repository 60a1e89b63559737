"""Integration tests for the HTML link shortener."""

import pytest
from httpx import ASGITransport, AsyncClient

from app import lifespan
from config import Config
from shortlinks.common.logging_config import setup_logging
from shortlinks.database.memory import URLShortenerMemoryDB
from web_app import create_app


@pytest.mark.asyncio
class TestIntegration:
    """End-to-end tests through the service lifespan."""

    async def test_full_template_lifecycle(self, sample_html):
        """Shorten a template, follow a short link, check the counters."""
        config = Config(
            database_url="memory://",
            base_url="http://testserver",
            redis_url=None,
            path_prefix="/go",
        )
        app = create_app(
            db_instance=None,
            cache_instance=None,
            service_instance=None,
            config=config,
        )
        app.state.logger = setup_logging(level="DEBUG")

        async with lifespan(app):
            assert isinstance(app.state.db, URLShortenerMemoryDB)

            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                # 1. Shorten the template
                response = await client.post("/api/shorten", json={"htmlContent": sample_html})
                assert response.status_code == 200
                data = response.json()
                sale = next(r for r in data["replacements"] if r["original_url"] == "https://example.com/sale")
                assert sale["short_url"] == f"http://testserver/go/{sale['short_code']}"
                assert data["modified_html"].count(sale["short_url"]) == 2

                # 2. Follow the short link
                redirect = await client.get(f"/go/{sale['short_code']}", follow_redirects=False)
                assert redirect.status_code == 301
                assert redirect.headers["location"] == "https://example.com/sale"

                # 3. Access count went up
                info = await client.get(f"/api/urls/{sale['short_code']}")
                assert info.json()["access_count"] == 1

                # 4. Shortening again creates nothing new
                again = await client.post("/api/shorten", json={"html_content": sample_html})
                assert again.json()["modified_html"] == data["modified_html"]
                stats = await client.get("/api/stats")
                assert stats.json()["total_urls"] == 6
                assert stats.json()["total_accesses"] == 1

    async def test_rewritten_template_shortens_to_itself(self, client, sample_html):
        first = await client.post("/api/shorten", json={"html_content": sample_html})
        rewritten = first.json()["modified_html"]

        extracted = await client.post("/api/extract", json={"html_content": rewritten})
        short_urls = sorted(r["short_url"] for r in first.json()["replacements"])
        assert extracted.json()["urls"] == short_urls
