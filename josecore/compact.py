"""Compact Serialization codec for JWS and JWE.

A JWS is ``header.payload.signature`` and a JWE is
``header.encrypted_key.iv.ciphertext.tag``; every segment is base64url
without padding.  Segments are kept encoded so that ``encode_compact`` of a
decoded token reproduces the input exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Dict, Mapping, Optional, Union

from .claims import EncryptionHeaderClaims, HeaderClaims, PayloadClaims
from .errors import MalformedToken
from .result import capture, optional
from .utils.base64 import b64url_decode, b64url_encode
from .utils.json import dump_json, parse_json_object_or_none

JWS_SEPARATORS = 2
JWE_SEPARATORS = 4


def encode_segment(raw: bytes) -> str:
    return b64url_encode(raw)


def decode_segment(segment: str) -> bytes:
    """Decode one base64url segment, raising ``MalformedToken`` on bad input."""
    try:
        return b64url_decode(segment)
    except ValueError as e:
        raise MalformedToken(f"Malformed base64url segment: {e}") from e


def encode_json_segment(value: Mapping[str, Any]) -> str:
    """Serialize ``value`` to canonical JSON and base64url-encode it."""
    return b64url_encode(dump_json(dict(value)).encode("utf-8"))


def decode_json_segment_or_none(segment: str) -> Optional[Dict[str, Any]]:
    try:
        text = decode_segment(segment).decode("utf-8")
    except (MalformedToken, UnicodeDecodeError):
        return None
    return parse_json_object_or_none(text)


def signing_input(header: str, payload: str) -> bytes:
    """Return the JWS Signing Input ``ASCII(header || '.' || payload)``."""
    return f"{header}.{payload}".encode("ascii")


@dataclass(frozen=True)
class CompactJWS(HeaderClaims, PayloadClaims):
    """The three segments of a JWS Compact Serialization (RFC 7515 section 7.1)."""

    header: str
    payload: str
    signature: str

    @property
    def value(self) -> str:
        return f"{self.header}.{self.payload}.{self.signature}"

    @cached_property
    def decoded_header(self) -> Optional[Dict[str, Any]]:
        return decode_json_segment_or_none(self.header)

    @cached_property
    def decoded_payload(self) -> Optional[Dict[str, Any]]:
        return decode_json_segment_or_none(self.payload)

    def _header_claims(self) -> Optional[Mapping[str, Any]]:
        return self.decoded_header

    def _payload_claims(self) -> Optional[Mapping[str, Any]]:
        return self.decoded_payload

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CompactJWE(EncryptionHeaderClaims):
    """The five segments of a JWE Compact Serialization (RFC 7516 section 7.1)."""

    header: str
    encrypted_key: str
    iv: str
    ciphertext: str
    tag: str

    @property
    def value(self) -> str:
        return ".".join(
            (self.header, self.encrypted_key, self.iv, self.ciphertext, self.tag)
        )

    @cached_property
    def decoded_header(self) -> Optional[Dict[str, Any]]:
        return decode_json_segment_or_none(self.header)

    def _header_claims(self) -> Optional[Mapping[str, Any]]:
        return self.decoded_header

    def __str__(self) -> str:
        return self.value


CompactToken = Union[CompactJWS, CompactJWE]


def _require_str(value: Any) -> str:
    if not isinstance(value, str):
        raise MalformedToken(f"Compact token must be a string, got {type(value).__name__}")
    return value


def decode_compact_jws(value: str) -> CompactJWS:
    segments = _require_str(value).split(".")
    if len(segments) != JWS_SEPARATORS + 1:
        raise MalformedToken("Malformed JWS was presented")
    return CompactJWS(*segments)


def decode_compact_jwe(value: str) -> CompactJWE:
    segments = _require_str(value).split(".")
    if len(segments) != JWE_SEPARATORS + 1:
        raise MalformedToken("Malformed JWE was presented")
    return CompactJWE(*segments)


def decode_compact(value: str) -> CompactToken:
    """Split ``value`` on periods and build the variant matching the segment count."""
    segments = _require_str(value).split(".")
    if len(segments) == JWS_SEPARATORS + 1:
        return CompactJWS(*segments)
    if len(segments) == JWE_SEPARATORS + 1:
        return CompactJWE(*segments)
    raise MalformedToken("Malformed JWT was presented")


def decode_compact_generic(value: str) -> CompactToken:
    """Classify ``value`` by its dot count, then decode the matching variant."""
    separators = _require_str(value).count(".")
    if separators == JWS_SEPARATORS:
        return decode_compact_jws(value)
    if separators == JWE_SEPARATORS:
        return decode_compact_jwe(value)
    raise MalformedToken("Malformed JWT was presented")


def is_compact_jws_quick(value: str) -> bool:
    return value.count(".") == JWS_SEPARATORS


def is_compact_jwe_quick(value: str) -> bool:
    return value.count(".") == JWE_SEPARATORS


def is_compact_quick(value: str) -> bool:
    return value.count(".") in (JWS_SEPARATORS, JWE_SEPARATORS)


def encode_compact(token: CompactToken) -> str:
    """Join the segments of ``token`` in their fixed wire order."""
    if isinstance(token, CompactJWS):
        return token.value
    if isinstance(token, CompactJWE):
        return token.value
    raise TypeError(f"Not a compact token: {type(token).__name__}")


decode_compact_result = capture(decode_compact)
decode_compact_or_none = optional(decode_compact_result)
decode_compact_generic_result = capture(decode_compact_generic)
decode_compact_generic_or_none = optional(decode_compact_generic_result)
decode_compact_jws_result = capture(decode_compact_jws)
decode_compact_jws_or_none = optional(decode_compact_jws_result)
decode_compact_jwe_result = capture(decode_compact_jwe)
decode_compact_jwe_or_none = optional(decode_compact_jwe_result)
