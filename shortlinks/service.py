"""Business logic for shortening the links of an HTML template."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

from .common.url_builder import build_short_url
from .database.base import URLShortenerDBBase
from .database.cache import RedisCache
from .document import HTMLInput, decode_html
from .errors import StoreError
from .extractor import extract_urls
from .rewriter import MappingEntry, rewrite_html
from .shortcode import ShortCodeGenerator


@dataclass
class ShortenResult:
    """Outcome of shortening one HTML document."""

    modified_html: str
    replacements: List[MappingEntry] = field(default_factory=list)
    urls_found: int = 0
    locations_rewritten: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "modified_html": self.modified_html,
            "replacements": [entry.to_dict() for entry in self.replacements],
            "stats": {
                "urls_found": self.urls_found,
                "urls_shortened": len(self.replacements),
                "locations_rewritten": self.locations_rewritten,
            },
        }


class HTMLShortenerService:
    """Extract, resolve and rewrite the links of HTML templates."""

    def __init__(
        self,
        db: URLShortenerDBBase,
        cache: Optional[RedisCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        path_prefix: str = "/r",
        max_collision_retries: int = 5,
    ):
        """Initialize the service.

        Args:
            db: Short code store
            cache: Optional redirect cache
            short_code_generator: Optional short code generator
            logger: Optional logger
            path_prefix: Redirect path prefix used in short URLs
            max_collision_retries: Random codes tried after a hash collision
        """
        self.db = db
        self.cache = cache
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.path_prefix = path_prefix
        self.max_collision_retries = max_collision_retries
        # serializes find-or-create so one process never mints two codes for a URL
        self._resolve_lock = asyncio.Lock()
        self._background_tasks: Set[asyncio.Task] = set()

    async def extract(self, html: HTMLInput) -> List[str]:
        """Return the eligible URLs of a document, sorted."""
        urls = await asyncio.to_thread(extract_urls, html)
        return sorted(urls)

    async def resolve(self, urls: Iterable[str], base_url: str) -> Dict[str, MappingEntry]:
        """Find or create the short code of every URL.

        Idempotent per URL: a URL that already has a code keeps it.

        Args:
            urls: Original URLs
            base_url: Public base URL for the short links

        Returns:
            Original URL -> MappingEntry, in store order (oldest mapping first)

        Raises:
            StoreError: If a mapping cannot be created
        """
        wanted = sorted(set(urls))
        if not wanted:
            return {}

        async with self._resolve_lock:
            rows = await self.db.find_by_original_urls(wanted)
            known = {row["original_url"] for row in rows}
            missing = [url for url in wanted if url not in known]

            created: Dict[str, str] = {}
            for url in missing:
                created[url] = await self._create_mapping(url)

            if missing:
                self.logger.info(f"Created {len(missing)} new short codes ({len(known)} reused)")
                rows = await self.db.find_by_original_urls(wanted)

        # Rows read back win (earliest per URL); fresh inserts may not be visible yet.
        codes = {row["original_url"]: row["short_code"] for row in rows}
        for url, code in created.items():
            codes.setdefault(url, code)

        mapping = {}
        for url, code in codes.items():
            mapping[url] = MappingEntry(
                original_url=url,
                short_code=code,
                short_url=build_short_url(code, base_url, self.path_prefix),
            )

        unresolved = [url for url in wanted if url not in mapping]
        if unresolved:
            raise StoreError(f"Store returned no mapping for {len(unresolved)} URL(s)")

        return mapping

    async def shorten_html(self, html: HTMLInput, base_url: str) -> ShortenResult:
        """Rewrite every eligible link of a document to a short URL.

        Args:
            html: HTML document as text or UTF-8 bytes
            base_url: Public base URL for the short links

        Returns:
            ShortenResult with the rewritten document and the mapping report

        Raises:
            MalformedInputError: If the document cannot be parsed
            StoreError: If short codes cannot be created
        """
        text = decode_html(html)
        urls = await asyncio.to_thread(extract_urls, text)
        mapping = await self.resolve(urls, base_url)
        result = await asyncio.to_thread(rewrite_html, text, mapping)

        self.logger.info(
            f"Shortened {len(mapping)} URLs at {result.replaced_count} locations"
        )

        return ShortenResult(
            modified_html=result.modified_html,
            replacements=result.used_mappings,
            urls_found=len(urls),
            locations_rewritten=result.replaced_count,
        )

    async def get_original_url(
        self,
        short_code: str,
        increment_count: bool = True,
    ) -> Optional[str]:
        """Get the original URL for a short code.

        Args:
            short_code: The short code to lookup
            increment_count: Whether to count this as a redirect

        Returns:
            Original URL or None if not found
        """
        if self.cache:
            cached_url = await self.cache.get(self.cache.get_cache_key(short_code))
            if cached_url:
                self.logger.debug(f"Cache hit for {short_code}")
                if increment_count:
                    task = asyncio.create_task(self.db.increment_access_count(short_code))
                    self._background_tasks.add(task)
                    task.add_done_callback(self._background_tasks.discard)
                return cached_url

        original_url = await self.db.get_original_url(short_code)

        if not original_url:
            self.logger.warning(f"Short code not found: {short_code}")
            return None

        if self.cache:
            await self.cache.set(self.cache.get_cache_key(short_code), original_url)

        if increment_count:
            await self.db.increment_access_count(short_code)

        self.logger.debug(f"Retrieved URL: {short_code} -> {original_url}")
        return original_url

    async def get_url_info(self, short_code: str) -> Optional[Dict[str, Any]]:
        """Get the stored row for a short code."""
        return await self.db.get_url_mapping(short_code)

    async def list_recent_urls(self, limit: int = 100) -> List[Dict[str, Any]]:
        return await self.db.list_recent_urls(limit)

    async def get_statistics(self) -> Dict[str, Any]:
        db_stats = await self.db.get_statistics()
        return {
            **db_stats,
            "cache_enabled": self.cache is not None and self.cache.enabled,
        }

    async def health_check(self) -> Dict[str, bool]:
        """Check store and cache health."""
        db_healthy = await self.db.health_check()
        cache_healthy = await self.cache.ping() if self.cache else True

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def _create_mapping(self, original_url: str) -> str:
        """Store a new code for a URL and return it.

        Tries the URL-derived code first, then random codes, then a UUID code.
        """
        candidates = [self.generator.generate_from_url(original_url)]
        candidates += [self.generator.generate_random() for _ in range(self.max_collision_retries)]
        candidates.append(self.generator.generate_from_uuid(length=8))

        for attempt, code in enumerate(candidates):
            if await self.db.create_short_url(code, original_url):
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return code

            # another process may have stored this URL under the same derived code
            if await self.db.get_original_url(code) == original_url:
                return code

        raise StoreError(f"Unable to generate unique short code for {original_url}")

    async def close(self) -> None:
        """Close store and cache connections."""
        await self.db.close()
        if self.cache:
            await self.cache.close()
