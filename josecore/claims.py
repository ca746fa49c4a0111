"""Typed accessors for registered header and payload claims.

Header parameters follow RFC 7515/7516 and payload claims follow RFC 7519.
A claim that is absent or has the wrong JSON type reads as ``None``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Mapping, Optional

from .utils.json import (
    as_string_list_coerce_or_none,
    as_string_list_or_none,
    as_timestamp_or_none,
    get_string,
)


class HeaderClaims:
    """Mixin exposing JWS/JWE protected header parameters."""

    def _header_claims(self) -> Optional[Mapping[str, Any]]:
        raise NotImplementedError

    def _header_value(self, name: str) -> Any:
        header = self._header_claims()
        return None if header is None else header.get(name)

    @property
    def alg(self) -> Optional[str]:
        return get_string(self._header_claims(), "alg")

    @property
    def jku(self) -> Optional[str]:
        return get_string(self._header_claims(), "jku")

    @property
    def jwk(self) -> Optional[Mapping[str, Any]]:
        value = self._header_value("jwk")
        return value if isinstance(value, Mapping) else None

    @property
    def kid(self) -> Optional[str]:
        return get_string(self._header_claims(), "kid")

    @property
    def x5u(self) -> Optional[str]:
        return get_string(self._header_claims(), "x5u")

    @property
    def x5c(self) -> Optional[List[str]]:
        return as_string_list_or_none(self._header_value("x5c"))

    @property
    def x5t(self) -> Optional[str]:
        return get_string(self._header_claims(), "x5t")

    @property
    def x5t_s256(self) -> Optional[str]:
        return get_string(self._header_claims(), "x5t#S256")

    @property
    def typ(self) -> Optional[str]:
        return get_string(self._header_claims(), "typ")

    @property
    def cty(self) -> Optional[str]:
        return get_string(self._header_claims(), "cty")

    @property
    def crit(self) -> Optional[List[str]]:
        return as_string_list_or_none(self._header_value("crit"))


class EncryptionHeaderClaims(HeaderClaims):
    """Adds the JWE-only ``enc`` and ``zip`` parameters."""

    @property
    def enc(self) -> Optional[str]:
        return get_string(self._header_claims(), "enc")

    @property
    def zip(self) -> Optional[str]:
        return get_string(self._header_claims(), "zip")


class PayloadClaims:
    """Mixin exposing registered JWT claims plus ``client_id``."""

    def _payload_claims(self) -> Optional[Mapping[str, Any]]:
        raise NotImplementedError

    def _payload_value(self, name: str) -> Any:
        payload = self._payload_claims()
        return None if payload is None else payload.get(name)

    @property
    def iss(self) -> Optional[str]:
        return get_string(self._payload_claims(), "iss")

    @property
    def sub(self) -> Optional[str]:
        return get_string(self._payload_claims(), "sub")

    @property
    def aud(self) -> Optional[List[str]]:
        return as_string_list_coerce_or_none(self._payload_value("aud"))

    @property
    def exp(self) -> Optional[datetime]:
        return as_timestamp_or_none(self._payload_value("exp"))

    @property
    def nbf(self) -> Optional[datetime]:
        return as_timestamp_or_none(self._payload_value("nbf"))

    @property
    def iat(self) -> Optional[datetime]:
        return as_timestamp_or_none(self._payload_value("iat"))

    @property
    def jti(self) -> Optional[str]:
        return get_string(self._payload_claims(), "jti")

    @property
    def client_id(self) -> Optional[str]:
        return get_string(self._payload_claims(), "client_id")
