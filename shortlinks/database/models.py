"""Data models for the short code store."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class URLMapping:
    """A stored short code row."""

    short_code: str
    original_url: str
    created_at: datetime
    access_count: int = 0
    last_accessed: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "short_code": self.short_code,
            "original_url": self.original_url,
            "created_at": self.created_at,
            "access_count": self.access_count,
            "last_accessed": self.last_accessed,
        }
