"""Key sets and the key selection algorithm."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from ..algorithms import is_compatible
from ..errors import InvalidKeySet
from ..result import capture, optional
from .base import Key
from .jwk import create_key

logger = logging.getLogger(__name__)

SIG = "sig"
ENC = "enc"


def _score(key: Key) -> int:
    score = 0
    if key.kid is not None:
        score -= 100
    if key.use is not None:
        score -= 1
    if key.key_ops is not None:
        score -= 1
    if key.alg is not None:
        score -= 1
    return score


class KeySet:
    """Immutable, ordered set of keys.

    Keys are unique by identity, not by ``kid``: several keys may share a
    ``kid``.  Iteration follows construction order, which makes selection
    deterministic for a given set.
    """

    def __init__(self, keys: Iterable[Key] = ()) -> None:
        unique = {}
        for key in keys:
            if not isinstance(key, Key):
                raise InvalidKeySet(f"Not a key: {type(key).__name__}")
            unique.setdefault(id(key), key)
        self._keys: Tuple[Key, ...] = tuple(unique.values())

    def __iter__(self) -> Iterator[Key]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return any(k is key for k in self._keys)

    def __repr__(self) -> str:
        return f"KeySet({list(self._keys)!r})"

    def to_public_dict(self) -> dict:
        """Return a publishable ``{"keys": [...]}`` document."""
        return {"keys": [dict(key.public_parameters) for key in self._keys]}

    def filter_sorted(
        self,
        use: str,
        operation: str,
        kid: Optional[str] = None,
        alg: Optional[str] = None,
    ) -> List[Key]:
        """Return candidate keys for ``operation``, most specific first."""
        filtered = list(self._keys)

        if kid is not None:
            filtered = [k for k in filtered if k.kid == kid]

        filtered = [k for k in filtered if k.use is None or k.use == use]
        # Keys that list the operation in key_ops are excluded.
        filtered = [k for k in filtered if not (k.key_ops and operation in k.key_ops)]

        if alg is not None:
            filtered = [k for k in filtered if k.alg is None or k.alg == alg]
            filtered = [k for k in filtered if is_compatible(k.kty, alg)]

        filtered.sort(key=_score)
        logger.debug(
            f"Selected {len(filtered)} of {len(self._keys)} keys for "
            f"use={use} operation={operation} kid={kid} alg={alg}"
        )
        return filtered

    def filter_sorted_encrypt(self, kid: Optional[str] = None, alg: Optional[str] = None) -> List[Key]:
        return self.filter_sorted(ENC, "encrypt", kid, alg)

    def filter_sorted_decrypt(self, kid: Optional[str] = None, alg: Optional[str] = None) -> List[Key]:
        return self.filter_sorted(ENC, "decrypt", kid, alg)

    def filter_sorted_sign(self, kid: Optional[str] = None, alg: Optional[str] = None) -> List[Key]:
        return self.filter_sorted(SIG, "sign", kid, alg)

    def filter_sorted_verify(self, kid: Optional[str] = None, alg: Optional[str] = None) -> List[Key]:
        return self.filter_sorted(SIG, "verify", kid, alg)

    def find_encrypt(self, kid: Optional[str] = None, alg: Optional[str] = None) -> Optional[Key]:
        return next(iter(self.filter_sorted_encrypt(kid, alg)), None)

    def find_decrypt(self, kid: Optional[str] = None, alg: Optional[str] = None) -> Optional[Key]:
        return next(iter(self.filter_sorted_decrypt(kid, alg)), None)

    def find_sign(self, kid: Optional[str] = None, alg: Optional[str] = None) -> Optional[Key]:
        return next(iter(self.filter_sorted_sign(kid, alg)), None)

    def find_verify(self, kid: Optional[str] = None, alg: Optional[str] = None) -> Optional[Key]:
        return next(iter(self.filter_sorted_verify(kid, alg)), None)


def create_keyset(document: Mapping[str, Any]) -> KeySet:
    """Build a key set from a parsed ``{"keys": [...]}`` document.

    Raises:
        InvalidKeySet: If the document or its ``keys`` member has the wrong shape.
        InvalidKey: If one of the keys is not a valid JWK.
    """
    if not isinstance(document, Mapping):
        raise InvalidKeySet("Bad JWKSet. Expected JSON object")
    keys = document.get("keys")
    if not isinstance(keys, list):
        raise InvalidKeySet("Bad JWKSet keys. Expected JSON array")
    for index, parameters in enumerate(keys):
        if not isinstance(parameters, dict):
            raise InvalidKeySet(f"Bad JWK at index {index}. Expected JSON object")
    return KeySet(create_key(parameters) for parameters in keys)


def decode_keyset(text: str) -> KeySet:
    try:
        document = json.loads(text)
    except ValueError as e:
        raise InvalidKeySet(f"Bad JWKSet JSON: {e}") from e
    return create_keyset(document)


def load_keyset(path: Union[str, Path]) -> KeySet:
    """Read a key set document from a local file."""
    keyset = decode_keyset(Path(path).read_text(encoding="utf-8"))
    logger.info(f"Loaded {len(keyset)} keys from {path}")
    return keyset


create_keyset_result = capture(create_keyset)
create_keyset_or_none = optional(create_keyset_result)
decode_keyset_result = capture(decode_keyset)
decode_keyset_or_none = optional(decode_keyset_result)
