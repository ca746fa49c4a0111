"""Default algorithm inference and key-type/algorithm compatibility rules."""

from __future__ import annotations

from typing import Dict, FrozenSet, Optional

NONE = "none"

DEFAULT_SIGN_ALGORITHMS: Dict[str, str] = {
    "RSA": "RS384",
    "EC": "ES384",
}

DEFAULT_ENCRYPT_ALGORITHMS: Dict[str, str] = {
    "RSA": "RSA-OAEP-256",
    "EC": "ECDH-ES+A256KW",
}

# Only one content encryption algorithm is negotiated by default.
DEFAULT_CONTENT_ENCRYPTION = "A128CBC-HS256"

COMPATIBLE_ALGORITHMS: Dict[str, FrozenSet[str]] = {
    "RSA": frozenset(
        {
            "RS256",
            "RS384",
            "RS512",
            "PS256",
            "PS384",
            "PS512",
            "RSA1_5",
            "RSA-OAEP",
            "RSA-OAEP-256",
        }
    ),
    "EC": frozenset(
        {
            "ES256",
            "ES384",
            "ES512",
            "ES256K",
            "EdDSA",
            "ECDH-ES",
            "ECDH-ES+A128KW",
            "ECDH-ES+A192KW",
            "ECDH-ES+A256KW",
        }
    ),
}

INSECURE_SIGNATURE_ALGORITHMS: FrozenSet[str] = frozenset({NONE})
INSECURE_KEY_MANAGEMENT_ALGORITHMS: FrozenSet[str] = frozenset({"RSA1_5"})


def default_sign_algorithm(kty: str, use: Optional[str], alg: Optional[str]) -> Optional[str]:
    """Return the signing algorithm for a key with the given parameters."""
    if use is not None and use != "sig":
        return None
    if alg is not None:
        return alg
    return DEFAULT_SIGN_ALGORITHMS.get(kty)


def default_encrypt_algorithm(kty: str, use: Optional[str], alg: Optional[str]) -> Optional[str]:
    """Return the key management algorithm for a key with the given parameters."""
    if use is not None and use != "enc":
        return None
    if alg is not None:
        return alg
    return DEFAULT_ENCRYPT_ALGORITHMS.get(kty)


def default_content_encryption(kty: str, use: Optional[str], alg: Optional[str]) -> str:
    return DEFAULT_CONTENT_ENCRYPTION


def is_compatible(kty: str, alg: str) -> bool:
    """Return ``True`` if a key of type ``kty`` can be used with ``alg``."""
    return alg in COMPATIBLE_ALGORITHMS.get(kty, frozenset())


def is_insecure_signature_algorithm(alg: Optional[str]) -> bool:
    return alg in INSECURE_SIGNATURE_ALGORITHMS


def is_insecure_key_management_algorithm(alg: Optional[str]) -> bool:
    return alg in INSECURE_KEY_MANAGEMENT_ALGORITHMS
