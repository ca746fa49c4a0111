"""Base crypto provider interface for josecore operations."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Tuple

from ..keys.base import Key

if TYPE_CHECKING:
    from ..compact import CompactJWE
    from ..token import Token


@dataclass(frozen=True)
class EncryptionResult:
    """Output of a JWE encryption.

    ``header`` is the final protected header; providers may add members such
    as ``epk`` to the header they were given.
    """

    header: Dict[str, Any]
    encrypted_key: bytes
    iv: bytes
    ciphertext: bytes
    tag: bytes


class CryptoProvider(metaclass=abc.ABCMeta):
    """Abstract provider of the raw cryptographic primitives.

    The orchestration layer resolves keys and algorithms and serializes the
    results; providers only sign, verify, encrypt and decrypt.
    """

    @abc.abstractmethod
    async def sign(self, signing_input: bytes, key: Key, alg: str) -> bytes:
        """Return the signature over ``signing_input``."""
        raise NotImplementedError

    @abc.abstractmethod
    async def verify(self, signing_input: bytes, signature: bytes, key: Key, alg: str) -> bool:
        """Return ``True`` if ``signature`` is valid for ``signing_input``."""
        raise NotImplementedError

    @abc.abstractmethod
    async def encrypt(self, token: "Token", key: Key, alg: str, enc: str) -> EncryptionResult:
        """Encrypt the payload of ``token`` using its header as the protected header."""
        raise NotImplementedError

    @abc.abstractmethod
    async def decrypt(
        self, jwe: "CompactJWE", key: Key, alg: str, enc: str
    ) -> Tuple[Dict[str, Any], str]:
        """Return the protected header and plaintext payload of ``jwe``."""
        raise NotImplementedError
