"""Common utilities for the HTML link shortener."""

from .validators import is_valid_url, is_valid_short_code
from .headers import extract_forwarded_headers, build_base_url
from .url_builder import build_short_url
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "extract_forwarded_headers",
    "build_base_url",
    "build_short_url",
    "setup_logging",
    "get_logger",
]
