"""Shorten every link of an HTML email template."""

from .errors import ShortLinksError, MalformedInputError, StoreError
from .locations import LOCATION_RULES, LocationRule, is_eligible
from .extractor import extract_urls
from .rewriter import MappingEntry, RewriteResult, rewrite_html
from .shortcode import ShortCodeGenerator
from .service import HTMLShortenerService, ShortenResult

__all__ = [
    "ShortLinksError",
    "MalformedInputError",
    "StoreError",
    "LOCATION_RULES",
    "LocationRule",
    "is_eligible",
    "extract_urls",
    "MappingEntry",
    "RewriteResult",
    "rewrite_html",
    "ShortCodeGenerator",
    "HTMLShortenerService",
    "ShortenResult",
]
