"""Exception types for the HTML link shortener."""


class ShortLinksError(Exception):
    """Base class for all link shortener errors."""


class MalformedInputError(ShortLinksError, ValueError):
    """Raised when the input cannot be parsed as an HTML document."""


class StoreError(ShortLinksError):
    """Raised when the short code store cannot create or read mappings."""
