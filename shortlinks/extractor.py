"""Find shortenable URLs in an HTML document."""

from typing import Set

from .document import HTMLInput, parse_document
from .locations import is_eligible, iter_locations


def extract_urls(html: HTMLInput) -> Set[str]:
    """Extract the unique eligible URLs from link-like attributes.

    Args:
        html: HTML document as text or UTF-8 bytes

    Returns:
        Set of eligible URLs (no ordering guarantee)

    Raises:
        MalformedInputError: If the input cannot be parsed
    """
    soup = parse_document(html)
    return {value for _, _, value in iter_locations(soup) if is_eligible(value)}
