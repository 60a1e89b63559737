"""Parsing and serializing HTML documents for the extract and rewrite passes."""

from typing import Union

from bs4 import BeautifulSoup, Doctype, NavigableString
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from .errors import MalformedInputError

# Lenient stdlib-backed parser; it does not add <html>/<body> wrappers,
# so fragments and full documents both serialize back to what was given.
PARSER = "html.parser"


class SourceOrderFormatter(HTMLFormatter):
    """HTMLFormatter that writes attributes in the order they were parsed."""

    def attributes(self, tag):
        if tag.attrs is None:
            return []
        return list(tag.attrs.items())


# Void elements without the trailing slash; only &, < and > escaped.
SERIALIZER = SourceOrderFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)

HTMLInput = Union[str, bytes]

# The serializer writes a newline after <!DOCTYPE ...>
DOCTYPE_ADDS_NEWLINE = getattr(Doctype, "SUFFIX", "").endswith("\n")


def decode_html(html: HTMLInput) -> str:
    """Validate the raw input and return it as text.

    Args:
        html: Document text, or UTF-8 encoded bytes

    Returns:
        Document text

    Raises:
        MalformedInputError: If the input is not text or not valid UTF-8
    """
    if isinstance(html, (bytes, bytearray)):
        try:
            return bytes(html).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"HTML is not valid UTF-8: {e}") from e

    if not isinstance(html, str):
        raise MalformedInputError(
            f"HTML must be str or bytes, got {type(html).__name__}"
        )

    try:
        html.encode("utf-8")
    except UnicodeEncodeError as e:
        raise MalformedInputError(f"HTML contains invalid characters: {e}") from e

    return html


def parse_document(html: HTMLInput) -> BeautifulSoup:
    """Parse HTML into a tree owned by the caller.

    Raises:
        MalformedInputError: If the input cannot be parsed
    """
    text = decode_html(html)
    try:
        soup = BeautifulSoup(text, PARSER)
    except Exception as e:
        raise MalformedInputError(f"Unable to parse HTML: {e}") from e

    _normalize_doctype(soup)
    return soup


def _normalize_doctype(soup: BeautifulSoup) -> None:
    """Make <!DOCTYPE> round-trip.

    A lowercase <!doctype html> reaches the tree with its keyword still
    attached, and serialization writes a newline after the declaration.
    """
    for node in soup.contents:
        if not isinstance(node, Doctype):
            continue
        if node.lower().startswith("doctype "):
            replacement = Doctype(node[len("doctype "):])
            node.replace_with(replacement)
            node = replacement
        if not DOCTYPE_ADDS_NEWLINE:
            return
        following = node.next_sibling
        if type(following) is NavigableString and following.startswith("\n"):
            if following == "\n":
                following.extract()
            else:
                following.replace_with(NavigableString(following[1:]))
        return


def serialize_document(soup: BeautifulSoup) -> str:
    """Serialize a (possibly mutated) tree back to HTML text."""
    return soup.decode(formatter=SERIALIZER)
