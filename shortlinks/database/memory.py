"""In-process implementation of the short code store (tests and local runs)."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .base import URLShortenerDBBase
from .models import URLMapping


class URLShortenerMemoryDB(URLShortenerDBBase):
    """Dictionary-backed store. Data lives only as long as the process."""

    def __init__(self, db_config: str = "memory://", logger: Optional[logging.Logger] = None):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger(__name__)
        self._by_code: Dict[str, URLMapping] = {}
        self._by_url: Dict[str, URLMapping] = {}
        self._lock = asyncio.Lock()

    async def find_by_original_urls(self, original_urls: Iterable[str]) -> List[Dict[str, Any]]:
        found = [self._by_url[url] for url in set(original_urls) if url in self._by_url]
        found.sort(key=lambda mapping: mapping.created_at)
        return [mapping.to_dict() for mapping in found]

    async def create_short_url(
        self,
        short_code: str,
        original_url: str,
        created_at: Optional[datetime] = None,
    ) -> bool:
        async with self._lock:
            if short_code in self._by_code:
                self.logger.warning(f"Short code already exists: {short_code}")
                return False

            mapping = URLMapping(
                short_code=short_code,
                original_url=original_url,
                created_at=created_at or datetime.now(timezone.utc),
            )
            self._by_code[short_code] = mapping
            # first code stored for a URL wins
            self._by_url.setdefault(original_url, mapping)
            return True

    async def get_original_url(self, short_code: str) -> Optional[str]:
        mapping = self._by_code.get(short_code)
        return mapping.original_url if mapping else None

    async def get_url_mapping(self, short_code: str) -> Optional[Dict[str, Any]]:
        mapping = self._by_code.get(short_code)
        return mapping.to_dict() if mapping else None

    async def short_code_exists(self, short_code: str) -> bool:
        return short_code in self._by_code

    async def increment_access_count(self, short_code: str) -> None:
        mapping = self._by_code.get(short_code)
        if not mapping:
            self.logger.warning(f"Cannot increment access count - short code not found: {short_code}")
            return
        mapping.access_count += 1
        mapping.last_accessed = datetime.now(timezone.utc)

    async def list_recent_urls(self, limit: int = 100) -> List[Dict[str, Any]]:
        recent = sorted(self._by_code.values(), key=lambda m: m.created_at, reverse=True)
        return [mapping.to_dict() for mapping in recent[:limit]]

    async def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_urls": len(self._by_code),
            "total_accesses": sum(m.access_count for m in self._by_code.values()),
            "database": "memory",
        }

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self._by_code.clear()
        self._by_url.clear()
