"""Decoded token model and builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .claims import EncryptionHeaderClaims, PayloadClaims
from .compact import CompactToken, encode_compact
from .errors import InvalidPayload
from .utils.json import dump_json, parse_json_object_or_none

HeaderBlock = Callable[[Dict[str, Any]], None]
HeaderSpec = Union[Mapping[str, Any], HeaderBlock, None]


def _build_header(header: HeaderSpec) -> Dict[str, Any]:
    if header is None:
        return {}
    if callable(header):
        staged: Dict[str, Any] = {}
        header(staged)
        return staged
    return dict(header)


@dataclass(frozen=True)
class Token(EncryptionHeaderClaims, PayloadClaims):
    """A decoded JWT: an ordered header map and a payload string.

    The payload is usually a JSON object serialized as text, but may be any
    string (for example a nested compact token).
    """

    header: Mapping[str, Any] = field(default_factory=dict)
    payload: str = ""

    # Unhashable: header values may be lists.
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "header", MappingProxyType(dict(self.header)))

    @cached_property
    def decoded_payload(self) -> Optional[Dict[str, Any]]:
        """The payload parsed as a JSON object, or ``None``."""
        return parse_json_object_or_none(self.payload)

    def _header_claims(self) -> Optional[Mapping[str, Any]]:
        return self.header

    def _payload_claims(self) -> Optional[Mapping[str, Any]]:
        return self.decoded_payload

    @classmethod
    def from_payload(cls, payload: str, header: HeaderSpec = None) -> "Token":
        return cls(header=_build_header(header), payload=payload)

    @classmethod
    def from_json(cls, value: Any, header: HeaderSpec = None) -> "Token":
        """Build a token whose payload is ``value`` serialized as canonical JSON."""
        return cls(header=_build_header(header), payload=dump_json(value))

    @classmethod
    def nested(cls, compact: CompactToken, header: HeaderSpec = None) -> "Token":
        """Wrap another compact token as the payload, e.g. for sign-then-encrypt."""
        return cls(header=_build_header(header), payload=encode_compact(compact))

    def headers(self, entries: HeaderSpec = None, /, **claims: Any) -> "Token":
        """Return a copy with header entries merged; later entries win.

        ``entries`` may be a mapping or a block that edits the current header
        in place.
        """
        merged = dict(self.header)
        if callable(entries):
            entries(merged)
        else:
            merged.update(entries or {})
        merged.update(claims)
        return Token(header=merged, payload=self.payload)

    def append(
        self,
        claims: Optional[Mapping[str, Any]] = None,
        header: Optional[Mapping[str, Any]] = None,
    ) -> "Token":
        """Return a copy with ``claims`` merged into the JSON payload.

        Raises:
            InvalidPayload: If the current payload is not a JSON object.
        """
        payload = self.decoded_payload
        if payload is None:
            raise InvalidPayload("Token payload is not a JSON object and cannot be appended to")

        builder = TokenBuilder(header=self.header, payload=payload)
        builder.header.update(header or {})
        builder.payload.update(claims or {})
        return builder.build()

    def to_dict(self) -> Dict[str, Any]:
        return {"header": dict(self.header), "payload": self.payload}


class TokenBuilder:
    """Mutable staging area for a token's header and payload claims."""

    def __init__(
        self,
        header: Optional[Mapping[str, Any]] = None,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.header: Dict[str, Any] = dict(header or {})
        self.payload: Dict[str, Any] = dict(payload or {})

    def set_header(self, name: str, value: Any) -> "TokenBuilder":
        self.header[name] = value
        return self

    def set_claim(self, name: str, value: Any) -> "TokenBuilder":
        self.payload[name] = value
        return self

    def build(self) -> Token:
        return Token(header=dict(self.header), payload=dump_json(self.payload))


def build_token(block: Callable[[TokenBuilder], None]) -> Token:
    """Run ``block`` against a fresh builder and return the finished token."""
    builder = TokenBuilder()
    block(builder)
    return builder.build()


__all__ = ["Token", "TokenBuilder", "build_token"]
