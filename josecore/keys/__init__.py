"""Keys, key sets and key selection."""

from __future__ import annotations

from .base import Key
from .jwk import (
    JsonWebKey,
    KeyParameters,
    create_key,
    create_key_or_none,
    create_key_result,
    decode_key,
    decode_key_or_none,
    decode_key_result,
)
from .keyset import (
    KeySet,
    create_keyset,
    create_keyset_or_none,
    create_keyset_result,
    decode_keyset,
    decode_keyset_or_none,
    decode_keyset_result,
    load_keyset,
)

__all__ = [
    "Key",
    "JsonWebKey",
    "KeyParameters",
    "KeySet",
    "create_key",
    "create_key_result",
    "create_key_or_none",
    "decode_key",
    "decode_key_result",
    "decode_key_or_none",
    "create_keyset",
    "create_keyset_result",
    "create_keyset_or_none",
    "decode_keyset",
    "decode_keyset_result",
    "decode_keyset_or_none",
    "load_keyset",
]
