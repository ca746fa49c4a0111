"""Error kinds raised by josecore operations."""

from __future__ import annotations


class JoseError(Exception):
    """Base exception for all JOSE processing failures."""

    kind = "jose_error"


class MalformedToken(JoseError):
    """Compact token has the wrong segment count or undecodable segments."""

    kind = "malformed_token"


class InvalidKeySet(JoseError):
    """Key set document does not have the ``{"keys": [...]}`` shape."""

    kind = "invalid_key_set"


class InvalidKey(JoseError):
    """Key parameters are not a valid JWK description."""

    kind = "invalid_key"


class KeyNotFound(JoseError):
    """No key in the key set survived selection."""

    kind = "key_not_found"

    def __init__(self, operation: str, kid: str | None = None, alg: str | None = None) -> None:
        super().__init__(f"{operation} failed: no matching key: kid={kid}; alg={alg}")
        self.operation = operation
        self.kid = kid
        self.alg = alg


class UnsupportedAlgorithm(JoseError):
    """Algorithm is unknown, missing, or incompatible with the key type."""

    kind = "unsupported_algorithm"


class InsecureAlgorithm(JoseError):
    """Algorithm is rejected while constraints are enforced."""

    kind = "insecure_algorithm"


class InvalidSignature(JoseError):
    """JWS signature did not verify."""

    kind = "invalid_signature"


class DecryptionFailure(JoseError):
    """JWE could not be decrypted or failed authentication."""

    kind = "decryption_failure"


class InvalidPayload(JoseError):
    """Token payload is not a JSON object where one is required."""

    kind = "invalid_payload"


class CryptoProviderError(JoseError):
    """Crypto provider failed with a provider-specific error."""

    kind = "crypto_provider_error"


__all__ = [
    "JoseError",
    "MalformedToken",
    "InvalidKeySet",
    "InvalidKey",
    "KeyNotFound",
    "UnsupportedAlgorithm",
    "InsecureAlgorithm",
    "InvalidSignature",
    "DecryptionFailure",
    "InvalidPayload",
    "CryptoProviderError",
]
