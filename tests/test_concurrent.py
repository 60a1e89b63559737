"""Concurrency tests."""

import asyncio

import pytest

from shortlinks.service import HTMLShortenerService


class TestConcurrentShortening:
    """Many requests shortening the same template at once."""

    @pytest.mark.asyncio
    async def test_same_template_gets_same_codes(self, service, test_db, sample_html):
        results = await asyncio.gather(
            *[service.shorten_html(sample_html, "https://sho.rt") for _ in range(25)]
        )

        assert len({result.modified_html for result in results}) == 1
        assert (await test_db.get_statistics())["total_urls"] == 6

    @pytest.mark.asyncio
    async def test_overlapping_templates_share_codes(self, service, test_db):
        templates = [
            f'<a href="https://shared.com">s</a><a href="https://own.com/{i}">o</a>'
            for i in range(10)
        ]

        results = await asyncio.gather(
            *[service.shorten_html(html, "https://sho.rt") for html in templates]
        )

        shared_codes = {
            entry.short_code
            for result in results
            for entry in result.replacements
            if entry.original_url == "https://shared.com"
        }
        assert len(shared_codes) == 1
        assert (await test_db.get_statistics())["total_urls"] == 11

    @pytest.mark.asyncio
    async def test_two_services_on_one_store(self, test_db, short_code_generator, logger):
        # separate locks, as with two worker processes sharing a database
        first = HTMLShortenerService(db=test_db, short_code_generator=short_code_generator, logger=logger)
        second = HTMLShortenerService(db=test_db, short_code_generator=short_code_generator, logger=logger)
        html = '<a href="https://a.com/promo">go</a>'

        results = await asyncio.gather(
            *[svc.shorten_html(html, "https://sho.rt") for svc in (first, second) * 5]
        )

        assert len({result.modified_html for result in results}) == 1
        assert (await test_db.get_statistics())["total_urls"] == 1
