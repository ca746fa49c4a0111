"""Base64url encoding as used by the JOSE compact serializations."""

from __future__ import annotations

import base64
import re

_ALPHABET = re.compile(r"^[A-Za-z0-9_-]*={0,2}$")


def b64url_encode(raw: bytes) -> str:
    """Encode ``raw`` with the URL-safe alphabet and no padding."""
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def b64url_decode(value: str) -> bytes:
    """Decode URL-safe base64, accepting optional padding.

    Raises:
        ValueError: If ``value`` contains characters outside the alphabet or
            has an impossible length.
    """
    if not _ALPHABET.match(value):
        raise ValueError("invalid base64url characters")
    stripped = value.rstrip("=")
    if len(stripped) % 4 == 1:
        raise ValueError("invalid base64url length")
    return base64.urlsafe_b64decode(stripped + "=" * (-len(stripped) % 4))
