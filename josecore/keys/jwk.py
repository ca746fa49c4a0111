"""JSON Web Key construction from parameter documents."""

from __future__ import annotations

import json
from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import InvalidKey
from ..result import capture, optional
from .base import Key

# Members that carry private or symmetric key material (RFC 7518 section 6).
PRIVATE_MEMBERS = frozenset({"d", "p", "q", "dp", "dq", "qi", "oth", "k"})


class KeyParameters(BaseModel):
    """Validated view of the JWK members used for key selection."""

    model_config = ConfigDict(extra="allow", frozen=True, strict=True)

    kty: str
    use: Optional[str] = None
    kid: Optional[str] = None
    alg: Optional[str] = None
    key_ops: Optional[List[str]] = None


class JsonWebKey(Key):
    """Key backed by its JWK parameter document."""

    def __init__(self, parameters: Mapping[str, Any]) -> None:
        if not isinstance(parameters, Mapping):
            raise InvalidKey("Bad JWK. Expected JSON object")
        try:
            self._model = KeyParameters.model_validate(dict(parameters))
        except ValidationError as e:
            raise InvalidKey(f"Bad JWK: {e.errors()[0]['loc']} {e.errors()[0]['msg']}") from e
        self._parameters = MappingProxyType(dict(parameters))
        self._public_parameters = MappingProxyType(
            {k: v for k, v in parameters.items() if k not in PRIVATE_MEMBERS}
        )

    @property
    def parameters(self) -> Mapping[str, Any]:
        return self._parameters

    @property
    def public_parameters(self) -> Mapping[str, Any]:
        return self._public_parameters

    @property
    def kty(self) -> str:
        return self._model.kty

    @property
    def use(self) -> Optional[str]:
        return self._model.use

    @property
    def kid(self) -> Optional[str]:
        return self._model.kid

    @property
    def alg(self) -> Optional[str]:
        return self._model.alg

    @property
    def key_ops(self) -> Optional[List[str]]:
        return None if self._model.key_ops is None else list(self._model.key_ops)

    @property
    def is_private(self) -> bool:
        return any(member in self._parameters for member in PRIVATE_MEMBERS)

    def __repr__(self) -> str:
        return f"JsonWebKey(kty={self.kty!r}, kid={self.kid!r}, use={self.use!r}, alg={self.alg!r})"


def create_key(parameters: Mapping[str, Any]) -> JsonWebKey:
    """Build a key from a parsed JWK object.

    Raises:
        InvalidKey: If ``parameters`` is not an object with a string ``kty``
            or its optional members have the wrong types.
    """
    return JsonWebKey(parameters)


def decode_key(text: str) -> JsonWebKey:
    """Parse JWK JSON text into a key."""
    try:
        parameters = json.loads(text)
    except ValueError as e:
        raise InvalidKey(f"Bad JWK JSON: {e}") from e
    if not isinstance(parameters, dict):
        raise InvalidKey("Bad JWK. Expected JSON object")
    return create_key(parameters)


create_key_result = capture(create_key)
create_key_or_none = optional(create_key_result)
decode_key_result = capture(decode_key)
decode_key_or_none = optional(decode_key_result)
