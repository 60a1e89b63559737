"""Rewrite URLs in an HTML document to their short URLs."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Union

from .document import HTMLInput, parse_document, serialize_document
from .locations import is_eligible, iter_locations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappingEntry:
    """An original URL and the short URL that replaces it."""

    original_url: str
    short_code: str
    short_url: str

    @classmethod
    def from_short_url(cls, original_url: str, short_url: str) -> "MappingEntry":
        """Build an entry from a bare short URL (code is its last path segment)."""
        short_code = short_url.rstrip("/").rsplit("/", 1)[-1]
        return cls(original_url=original_url, short_code=short_code, short_url=short_url)

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary."""
        return {
            "original_url": self.original_url,
            "short_code": self.short_code,
            "short_url": self.short_url,
        }


@dataclass
class RewriteResult:
    """Rewritten document plus the mapping report."""

    modified_html: str
    used_mappings: List[MappingEntry] = field(default_factory=list)
    # number of attribute values actually replaced
    replaced_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "modified_html": self.modified_html,
            "used_mappings": [entry.to_dict() for entry in self.used_mappings],
            "replaced_count": self.replaced_count,
        }


MappingValue = Union[MappingEntry, str]


def _normalize_mapping(mapping: Mapping[str, MappingValue]) -> Dict[str, MappingEntry]:
    entries = {}
    for original_url, value in mapping.items():
        if isinstance(value, MappingEntry):
            entries[original_url] = value
        else:
            entries[original_url] = MappingEntry.from_short_url(original_url, value)
    return entries


def rewrite_html(html: HTMLInput, mapping: Mapping[str, MappingValue]) -> RewriteResult:
    """Replace every mapped URL at a link location with its short URL.

    The same location rules as extraction decide where to look; the mapping
    alone decides what gets replaced. Locations whose value is not a key of
    ``mapping`` are left untouched.

    The report is every entry of ``mapping`` in mapping order, whether or not
    it was found in this document.

    Args:
        html: HTML document as text or UTF-8 bytes
        mapping: Original URL -> MappingEntry, or original URL -> short URL

    Returns:
        RewriteResult with the serialized document and the report

    Raises:
        MalformedInputError: If the input cannot be parsed
    """
    entries = _normalize_mapping(mapping)
    soup = parse_document(html)

    # Read every location before writing so a replaced value is never looked up again.
    replaced = 0
    for element, attribute, value in list(iter_locations(soup)):
        entry = entries.get(value)
        if entry is not None:
            element[attribute] = entry.short_url
            replaced += 1
        elif is_eligible(value):
            logger.debug(f"No short URL for {value}, left as is")

    return RewriteResult(
        modified_html=serialize_document(soup),
        used_mappings=list(entries.values()),
        replaced_count=replaced,
    )
