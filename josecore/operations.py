"""Sign, verify, encrypt and decrypt tokens against a key set.

Key and algorithm resolution happens here; the cryptography itself is
delegated to a :class:`~josecore.providers.base.CryptoProvider`.  Every
operation has a canonical ``*_result`` form returning a
:class:`~josecore.result.Result`, plus a raising form and an ``*_or_none``
form derived from it.

Operations take ``enforce_constraints`` as an argument; the
``enforce_constraints`` config setting only supplies the CLI default.
Without ``provider=``, each call resolves the provider from the current
configuration, so pass one explicitly to reuse it across calls.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Dict, Optional, TypeVar

import yaml

from .algorithms import (
    NONE,
    default_content_encryption,
    default_encrypt_algorithm,
    default_sign_algorithm,
    is_insecure_key_management_algorithm,
    is_insecure_signature_algorithm,
)
from .compact import (
    CompactJWE,
    CompactJWS,
    decode_compact_jwe,
    decode_compact_jws,
    decode_segment,
    encode_compact,
    encode_json_segment,
    encode_segment,
    signing_input,
)
from .errors import (
    CryptoProviderError,
    DecryptionFailure,
    InsecureAlgorithm,
    InvalidSignature,
    JoseError,
    KeyNotFound,
    MalformedToken,
    UnsupportedAlgorithm,
)
from .keys.base import Key
from .keys.keyset import KeySet
from .providers import get_provider
from .providers.base import CryptoProvider
from .result import capture, optional, raising
from .token import Token
from .utils.json import get_string

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _call_provider(call: Awaitable[T], wrap: type = CryptoProviderError) -> T:
    try:
        return await call
    except JoseError:
        raise
    except Exception as e:
        raise wrap(f"Crypto provider failed: {e}") from e


def _resolve_provider(provider: Optional[CryptoProvider]) -> CryptoProvider:
    if provider is not None:
        return provider
    try:
        return get_provider()
    except (ValueError, OSError, yaml.YAMLError) as e:
        # pydantic's ValidationError is a ValueError.
        raise CryptoProviderError(f"Cannot configure crypto provider: {e}") from e


def _decoded_header(jws_or_jwe: Any) -> Dict[str, Any]:
    header = jws_or_jwe.decoded_header
    if header is None:
        raise MalformedToken("Token header is not a base64url JSON object")
    return header


def _resolve_verify_key(jws: CompactJWS, keys: KeySet) -> tuple:
    header = _decoded_header(jws)
    alg = get_string(header, "alg")
    kid = get_string(header, "kid")

    key = keys.find_verify(kid, alg)
    if key is None:
        logger.warning(f"No verification key for kid={kid} alg={alg}")
        raise KeyNotFound("jws verification", kid, alg)
    if alg is None:
        raise UnsupportedAlgorithm("JWS header has no 'alg'")
    logger.debug(f"Verifying with key kid={key.kid} kty={key.kty} alg={alg}")
    return key, alg


async def _verify_signature(
    jws: CompactJWS, key: Key, alg: str, provider: Optional[CryptoProvider]
) -> bool:
    provider = _resolve_provider(provider)
    signature = decode_segment(jws.signature)
    return await _call_provider(
        provider.verify(signing_input(jws.header, jws.payload), signature, key, alg)
    )


def _reject_none(enforce_constraints: bool) -> None:
    if enforce_constraints:
        logger.warning("Rejected JWS with alg=none")
        raise InsecureAlgorithm("Algorithm 'none' is not allowed while constraints are enforced")


def _unverified(jws: CompactJWS) -> Token:
    header = _decoded_header(jws)
    try:
        payload = decode_segment(jws.payload).decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedToken("JWS payload is not UTF-8") from e
    return Token(header=header, payload=payload)


async def _sign(
    token: Token,
    keys: KeySet,
    enforce_constraints: bool = True,
    *,
    provider: Optional[CryptoProvider] = None,
) -> CompactJWS:
    alg = token.alg
    kid = token.kid
    payload_segment = encode_segment(token.payload.encode("utf-8"))

    # Unsigned tokens skip key lookup regardless of enforce_constraints.
    if alg == NONE:
        return CompactJWS(encode_json_segment(token.header), payload_segment, "")

    key = keys.find_sign(kid, alg)
    if key is None:
        logger.warning(f"No signing key for kid={kid} alg={alg}")
        raise KeyNotFound("jws signing", kid, alg)

    alg = alg or default_sign_algorithm(key.kty, key.use, key.alg)
    if alg is None:
        raise UnsupportedAlgorithm(f"No signing algorithm for kty={key.kty} kid={key.kid}")
    if enforce_constraints and is_insecure_signature_algorithm(alg):
        raise InsecureAlgorithm(f"Algorithm '{alg}' is not allowed while constraints are enforced")

    header = dict(token.header)
    if key.kid is not None:
        header["kid"] = key.kid
    header["alg"] = alg
    logger.debug(f"Signing with key kid={key.kid} kty={key.kty} alg={alg}")

    header_segment = encode_json_segment(header)
    provider = _resolve_provider(provider)
    signature = await _call_provider(
        provider.sign(signing_input(header_segment, payload_segment), key, alg)
    )
    logger.info(f"Signed JWS with kid={key.kid} alg={alg}")
    return CompactJWS(header_segment, payload_segment, encode_segment(signature))


async def _verify(
    jws: CompactJWS,
    keys: KeySet,
    enforce_constraints: bool = True,
    *,
    provider: Optional[CryptoProvider] = None,
) -> bool:
    if get_string(_decoded_header(jws), "alg") == NONE:
        _reject_none(enforce_constraints)
        return True
    key, alg = _resolve_verify_key(jws, keys)
    return await _verify_signature(jws, key, alg, provider)


async def _verified(
    jws: CompactJWS,
    keys: KeySet,
    enforce_constraints: bool = True,
    *,
    provider: Optional[CryptoProvider] = None,
) -> Token:
    if get_string(_decoded_header(jws), "alg") == NONE:
        _reject_none(enforce_constraints)
        return _unverified(jws)
    key, alg = _resolve_verify_key(jws, keys)
    if not await _verify_signature(jws, key, alg, provider):
        raise InvalidSignature(f"JWS signature verification failed: kid={key.kid}; alg={alg}")
    return _unverified(jws)


async def _encrypt(
    token: Token,
    keys: KeySet,
    enforce_constraints: bool = True,
    *,
    provider: Optional[CryptoProvider] = None,
) -> CompactJWE:
    alg = token.alg
    kid = token.kid

    key = keys.find_encrypt(kid, alg)
    if key is None:
        logger.warning(f"No encryption key for kid={kid} alg={alg}")
        raise KeyNotFound("jwe encryption", kid, alg)

    alg = alg or default_encrypt_algorithm(key.kty, key.use, key.alg)
    if alg is None:
        raise UnsupportedAlgorithm(f"No key management algorithm for kty={key.kty} kid={key.kid}")
    enc = token.enc or default_content_encryption(key.kty, key.use, key.alg)
    if enforce_constraints and is_insecure_key_management_algorithm(alg):
        logger.warning(f"Rejected key management algorithm {alg}")
        raise InsecureAlgorithm(f"Algorithm '{alg}' is not allowed while constraints are enforced")

    header = dict(token.header)
    if key.kid is not None:
        header["kid"] = key.kid
    header["alg"] = alg
    header["enc"] = enc
    logger.debug(f"Encrypting with key kid={key.kid} kty={key.kty} alg={alg} enc={enc}")

    provider = _resolve_provider(provider)
    result = await _call_provider(
        provider.encrypt(Token(header=header, payload=token.payload), key, alg, enc)
    )
    logger.info(f"Encrypted JWE with kid={key.kid} alg={alg} enc={enc}")
    return CompactJWE(
        encode_json_segment(result.header),
        encode_segment(result.encrypted_key),
        encode_segment(result.iv),
        encode_segment(result.ciphertext),
        encode_segment(result.tag),
    )


async def _decrypt(
    jwe: CompactJWE,
    keys: KeySet,
    enforce_constraints: bool = True,
    *,
    provider: Optional[CryptoProvider] = None,
) -> Token:
    header = _decoded_header(jwe)
    alg = get_string(header, "alg")
    enc = get_string(header, "enc")
    kid = get_string(header, "kid")

    # Decryption keys are looked up with the encryption selection rules.
    key = keys.find_encrypt(kid, alg)
    if key is None:
        logger.warning(f"No decryption key for kid={kid} alg={alg}")
        raise KeyNotFound("jwe decryption", kid, alg)
    if alg is None or enc is None:
        raise UnsupportedAlgorithm("JWE header requires both 'alg' and 'enc'")
    if enforce_constraints and is_insecure_key_management_algorithm(alg):
        logger.warning(f"Rejected key management algorithm {alg}")
        raise InsecureAlgorithm(f"Algorithm '{alg}' is not allowed while constraints are enforced")

    logger.debug(f"Decrypting with key kid={key.kid} kty={key.kty} alg={alg} enc={enc}")
    provider = _resolve_provider(provider)
    decrypted_header, payload = await _call_provider(
        provider.decrypt(jwe, key, alg, enc), wrap=DecryptionFailure
    )
    return Token(header=decrypted_header, payload=payload)


async def _sign_to_string(
    token: Token,
    keys: KeySet,
    enforce_constraints: bool = True,
    *,
    provider: Optional[CryptoProvider] = None,
) -> str:
    return encode_compact(await _sign(token, keys, enforce_constraints, provider=provider))


async def _encrypt_to_string(
    token: Token,
    keys: KeySet,
    enforce_constraints: bool = True,
    *,
    provider: Optional[CryptoProvider] = None,
) -> str:
    return encode_compact(await _encrypt(token, keys, enforce_constraints, provider=provider))


async def _verify_compact_jws(
    value: str,
    keys: KeySet,
    enforce_constraints: bool = True,
    *,
    provider: Optional[CryptoProvider] = None,
) -> bool:
    return await _verify(decode_compact_jws(value), keys, enforce_constraints, provider=provider)


async def _verified_compact_jws(
    value: str,
    keys: KeySet,
    enforce_constraints: bool = True,
    *,
    provider: Optional[CryptoProvider] = None,
) -> Token:
    return await _verified(decode_compact_jws(value), keys, enforce_constraints, provider=provider)


def _unverified_compact_jws(value: str) -> Token:
    return _unverified(decode_compact_jws(value))


async def _decrypt_compact_jwe(
    value: str,
    keys: KeySet,
    enforce_constraints: bool = True,
    *,
    provider: Optional[CryptoProvider] = None,
) -> Token:
    return await _decrypt(decode_compact_jwe(value), keys, enforce_constraints, provider=provider)


sign_result = capture(_sign)
sign = raising(sign_result)
sign_or_none = optional(sign_result)

verify_result = capture(_verify)
verify = raising(verify_result)
verify_or_none = optional(verify_result)

verified_result = capture(_verified)
verified = raising(verified_result)
verified_or_none = optional(verified_result)

unverified_result = capture(_unverified)
unverified = raising(unverified_result)
unverified_or_none = optional(unverified_result)

encrypt_result = capture(_encrypt)
encrypt = raising(encrypt_result)
encrypt_or_none = optional(encrypt_result)

decrypt_result = capture(_decrypt)
decrypt = raising(decrypt_result)
decrypt_or_none = optional(decrypt_result)

sign_to_string_result = capture(_sign_to_string)
sign_to_string = raising(sign_to_string_result)
sign_to_string_or_none = optional(sign_to_string_result)

encrypt_to_string_result = capture(_encrypt_to_string)
encrypt_to_string = raising(encrypt_to_string_result)
encrypt_to_string_or_none = optional(encrypt_to_string_result)

verify_compact_jws_result = capture(_verify_compact_jws)
verify_compact_jws = raising(verify_compact_jws_result)
verify_compact_jws_or_none = optional(verify_compact_jws_result)

verified_compact_jws_result = capture(_verified_compact_jws)
verified_compact_jws = raising(verified_compact_jws_result)
verified_compact_jws_or_none = optional(verified_compact_jws_result)

unverified_compact_jws_result = capture(_unverified_compact_jws)
unverified_compact_jws = raising(unverified_compact_jws_result)
unverified_compact_jws_or_none = optional(unverified_compact_jws_result)

decrypt_compact_jwe_result = capture(_decrypt_compact_jwe)
decrypt_compact_jwe = raising(decrypt_compact_jwe_result)
decrypt_compact_jwe_or_none = optional(decrypt_compact_jwe_result)
