"""josecore: JOSE token processing (JWS/JWE compact serialization, JWK sets)."""

from .compact import (
    CompactJWE,
    CompactJWS,
    decode_compact,
    decode_compact_generic,
    decode_compact_jwe,
    decode_compact_jws,
    encode_compact,
)
from .errors import JoseError
from .keys import KeySet, create_key, create_keyset, decode_keyset, load_keyset
from .operations import (
    decrypt,
    decrypt_compact_jwe,
    encrypt,
    encrypt_to_string,
    sign,
    sign_to_string,
    unverified,
    unverified_compact_jws,
    verified,
    verified_compact_jws,
    verify,
    verify_compact_jws,
)
from .providers import get_provider
from .result import Result
from .token import Token, TokenBuilder, build_token

__version__ = "0.1.0"
__all__ = [
    "CompactJWE",
    "CompactJWS",
    "JoseError",
    "KeySet",
    "Result",
    "Token",
    "TokenBuilder",
    "build_token",
    "create_key",
    "create_keyset",
    "decode_compact",
    "decode_compact_generic",
    "decode_compact_jwe",
    "decode_compact_jws",
    "decode_keyset",
    "decrypt",
    "decrypt_compact_jwe",
    "encode_compact",
    "encrypt",
    "encrypt_to_string",
    "get_provider",
    "load_keyset",
    "sign",
    "sign_to_string",
    "unverified",
    "unverified_compact_jws",
    "verified",
    "verified_compact_jws",
    "verify",
    "verify_compact_jws",
]
