"""Short code generation."""

import hashlib
import secrets
import string
import uuid
from typing import Optional


class ShortCodeGenerator:
    """Generate short codes for original URLs."""

    # Base62 alphabet (case-sensitive)
    ALPHABET = string.ascii_letters + string.digits

    def __init__(self, default_length: int = 6):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
        """
        if default_length < 1:
            raise ValueError("default_length must be positive")
        self.default_length = default_length

    def generate_from_url(self, url: str, length: Optional[int] = None) -> str:
        """Derive a code from the URL's SHA-256 digest.

        The same URL always yields the same code, so concurrent creators of one
        URL agree on its code. Different URLs may collide.

        Args:
            url: Original URL
            length: Code length (uses default if not specified)

        Returns:
            Short code
        """
        length = length or self.default_length
        digest = int(hashlib.sha256(url.encode("utf-8")).hexdigest(), 16)
        return self._int_to_base62(digest)[:length]

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random code (used after a hash collision)."""
        length = length or self.default_length
        return "".join(secrets.choice(self.ALPHABET) for _ in range(length))

    def generate_from_uuid(self, length: Optional[int] = None) -> str:
        """Generate a code from a random UUID (last resort)."""
        length = length or self.default_length
        return self._int_to_base62(uuid.uuid4().int)[:length]

    def _int_to_base62(self, num: int) -> str:
        if num == 0:
            return self.ALPHABET[0]

        base = len(self.ALPHABET)
        chars = []
        while num > 0:
            num, remainder = divmod(num, base)
            chars.append(self.ALPHABET[remainder])

        return "".join(reversed(chars))

    @classmethod
    def is_valid_format(cls, code: str) -> bool:
        """Check that a code only uses the base62 alphabet."""
        return bool(code) and all(c in cls.ALPHABET for c in code)
