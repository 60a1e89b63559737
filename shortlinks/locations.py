"""URL location rules and the eligibility filter shared by extraction and rewrite."""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True)
class LocationRule:
    """An (element, attribute) pair that may hold a URL.

    A ``tag`` of None matches any element carrying the attribute.
    """

    tag: Optional[str]
    attribute: str


LOCATION_RULES: Tuple[LocationRule, ...] = (
    LocationRule("a", "href"),
    LocationRule("img", "src"),
    LocationRule("script", "src"),
    LocationRule("link", "href"),
    LocationRule("form", "action"),
    LocationRule(None, "data-url"),
)

SKIP_PREFIXES = ("data:", "mailto:", "tel:", "#")
ALLOWED_PREFIXES = ("http://", "https://")


def is_eligible(url: Optional[str]) -> bool:
    """Return True if the attribute value should be shortened.

    Args:
        url: Raw attribute value

    Returns:
        True for non-empty http(s) URLs (case-sensitive prefix match)
    """
    if not url or not isinstance(url, str):
        return False
    if url.startswith(SKIP_PREFIXES):
        return False
    if url.strip() == "":
        return False
    if not url.startswith(ALLOWED_PREFIXES):
        return False
    return True


def iter_locations(soup: BeautifulSoup) -> Iterator[Tuple[Tag, str, str]]:
    """Walk every rule over the document.

    Yields:
        (element, attribute name, current attribute value) for each match
    """
    for rule in LOCATION_RULES:
        name = rule.tag if rule.tag is not None else True
        for element in soup.find_all(name, attrs={rule.attribute: True}):
            value = element.get(rule.attribute)
            # multi-valued attributes come back as lists
            if isinstance(value, list):
                value = " ".join(value)
            yield element, rule.attribute, value
