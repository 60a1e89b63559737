"""Abstract base class for short code store implementations."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional


class URLShortenerDBBase(ABC):
    """Persistent lookup table between short codes and original URLs."""

    def __init__(self, db_config: str):
        """Initialize the store.

        Args:
            db_config: Store connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def find_by_original_urls(self, original_urls: Iterable[str]) -> List[Dict[str, Any]]:
        """Find existing mappings for a batch of original URLs.

        Args:
            original_urls: Original URLs to look up

        Returns:
            One mapping dict per known URL (the earliest created when a URL was
            stored more than once), ordered oldest first
        """
        pass

    @abstractmethod
    async def create_short_url(
        self,
        short_code: str,
        original_url: str,
        created_at: Optional[datetime] = None,
    ) -> bool:
        """Create a new mapping.

        Args:
            short_code: The short code to use
            original_url: The original URL
            created_at: Optional creation timestamp (defaults to now)

        Returns:
            True if created, False if short_code already exists
        """
        pass

    @abstractmethod
    async def get_original_url(self, short_code: str) -> Optional[str]:
        """Get the original URL for a short code, or None."""
        pass

    @abstractmethod
    async def get_url_mapping(self, short_code: str) -> Optional[Dict[str, Any]]:
        """Get the full mapping row for a short code, or None."""
        pass

    @abstractmethod
    async def short_code_exists(self, short_code: str) -> bool:
        """Check if a short code is taken."""
        pass

    @abstractmethod
    async def increment_access_count(self, short_code: str) -> None:
        """Record one redirect through a short code."""
        pass

    @abstractmethod
    async def list_recent_urls(self, limit: int = 100) -> List[Dict[str, Any]]:
        """List the most recently created mappings, newest first."""
        pass

    @abstractmethod
    async def get_statistics(self) -> Dict[str, Any]:
        """Get store statistics (total_urls, total_accesses, database)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close connections."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True if the store is reachable."""
        pass
