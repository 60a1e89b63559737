"""Short URL construction."""


def build_short_url(
    short_code: str,
    base_url: str,
    path_prefix: str = "/r",
) -> str:
    """Build the public short URL for a code.

    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Redirect path prefix (e.g., /r)

    Returns:
        Complete short URL, e.g. https://example.com/r/abc123
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{short_code}"
    return f"{base}/{short_code}"
