"""Crypto provider backed by ``cryptography`` and PyJWT's JWA implementations.

Signatures reuse PyJWT's algorithm objects, which already handle JWK import
and the raw ``r || s`` ECDSA signature format.  JWE key management and
content encryption follow RFC 7518 sections 4 and 5.
"""

from __future__ import annotations

import logging
import os
import struct
import zlib
from typing import Any, Callable, Dict, Mapping, Tuple, Type, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import constant_time, hashes, hmac
from cryptography.hazmat.primitives.asymmetric import ec, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.concatkdf import ConcatKDFHash
from cryptography.hazmat.primitives.keywrap import InvalidUnwrap, aes_key_unwrap, aes_key_wrap
from cryptography.hazmat.primitives.padding import PKCS7
from jwt.algorithms import Algorithm, ECAlgorithm, RSAAlgorithm, get_default_algorithms
from jwt.exceptions import InvalidKeyError

from ..algorithms import is_compatible
from ..compact import CompactJWE, decode_segment, encode_json_segment, encode_segment
from ..errors import DecryptionFailure, InvalidKey, UnsupportedAlgorithm
from ..keys.base import Key
from ..keys.jwk import PRIVATE_MEMBERS
from ..token import Token
from .base import CryptoProvider, EncryptionResult

logger = logging.getLogger(__name__)

SIGNATURE_ALGORITHMS = frozenset(
    {"RS256", "RS384", "RS512", "PS256", "PS384", "PS512", "ES256", "ES384", "ES512", "ES256K"}
)

RSA_KEY_MANAGEMENT: Dict[str, Callable[[], padding.AsymmetricPadding]] = {
    "RSA1_5": lambda: padding.PKCS1v15(),
    "RSA-OAEP": lambda: padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA1()), algorithm=hashes.SHA1(), label=None
    ),
    "RSA-OAEP-256": lambda: padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()), algorithm=hashes.SHA256(), label=None
    ),
}

ECDH_DIRECT = "ECDH-ES"
ECDH_KEY_WRAP_SIZES = {"ECDH-ES+A128KW": 16, "ECDH-ES+A192KW": 24, "ECDH-ES+A256KW": 32}

CBC_HMAC_HASHES = {
    "A128CBC-HS256": hashes.SHA256,
    "A192CBC-HS384": hashes.SHA384,
    "A256CBC-HS512": hashes.SHA512,
}
CONTENT_KEY_SIZES = {
    "A128CBC-HS256": 32,
    "A192CBC-HS384": 48,
    "A256CBC-HS512": 64,
    "A128GCM": 16,
    "A192GCM": 24,
    "A256GCM": 32,
}

CURVE_NAMES = {"secp256r1": "P-256", "secp384r1": "P-384", "secp521r1": "P-521"}

DEFLATE = "DEF"


def _content_key_size(enc: str) -> int:
    try:
        return CONTENT_KEY_SIZES[enc]
    except KeyError:
        raise UnsupportedAlgorithm(f"Unsupported content encryption: {enc}") from None


def _load_key(algorithm: Union[Algorithm, Type[Algorithm]], parameters: Mapping[str, Any]) -> Any:
    try:
        return algorithm.from_jwk(dict(parameters))
    except InvalidKeyError as e:
        raise InvalidKey(f"Cannot import JWK: {e}") from e


def _require_private(key: Key, purpose: str) -> None:
    if not any(member in key.parameters for member in PRIVATE_MEMBERS):
        raise InvalidKey(f"{purpose} requires a private key: kid={key.kid}")


def _epk(public_key: ec.EllipticCurvePublicKey) -> Dict[str, str]:
    size = (public_key.curve.key_size + 7) // 8
    numbers = public_key.public_numbers()
    return {
        "kty": "EC",
        "crv": CURVE_NAMES[public_key.curve.name],
        "x": encode_segment(numbers.x.to_bytes(size, "big")),
        "y": encode_segment(numbers.y.to_bytes(size, "big")),
    }


def _length_prefixed(data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + data


def _concat_kdf(shared_secret: bytes, algorithm_id: str, size: int, header: Mapping[str, Any]) -> bytes:
    """Derive ``size`` bytes with the Concat KDF of RFC 7518 section 4.6.2."""
    apu = decode_segment(header["apu"]) if isinstance(header.get("apu"), str) else b""
    apv = decode_segment(header["apv"]) if isinstance(header.get("apv"), str) else b""
    other_info = (
        _length_prefixed(algorithm_id.encode("ascii"))
        + _length_prefixed(apu)
        + _length_prefixed(apv)
        + struct.pack(">I", size * 8)
    )
    return ConcatKDFHash(algorithm=hashes.SHA256(), length=size, otherinfo=other_info).derive(
        shared_secret
    )


def _cbc_hmac_tag(enc: str, mac_key: bytes, aad: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    signer = hmac.HMAC(mac_key, CBC_HMAC_HASHES[enc]())
    signer.update(aad + iv + ciphertext + struct.pack(">Q", len(aad) * 8))
    return signer.finalize()[: len(mac_key)]


def encrypt_content(enc: str, cek: bytes, plaintext: bytes, aad: bytes) -> Tuple[bytes, bytes, bytes]:
    """Encrypt ``plaintext`` and return ``(iv, ciphertext, tag)``."""
    if enc in CBC_HMAC_HASHES:
        half = len(cek) // 2
        mac_key, enc_key = cek[:half], cek[half:]
        iv = os.urandom(16)
        padder = PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return iv, ciphertext, _cbc_hmac_tag(enc, mac_key, aad, iv, ciphertext)

    if enc in CONTENT_KEY_SIZES:
        iv = os.urandom(12)
        sealed = AESGCM(cek).encrypt(iv, plaintext, aad)
        return iv, sealed[:-16], sealed[-16:]

    raise UnsupportedAlgorithm(f"Unsupported content encryption: {enc}")


def decrypt_content(enc: str, cek: bytes, iv: bytes, ciphertext: bytes, tag: bytes, aad: bytes) -> bytes:
    if enc in CBC_HMAC_HASHES:
        half = len(cek) // 2
        mac_key, enc_key = cek[:half], cek[half:]
        if not constant_time.bytes_eq(_cbc_hmac_tag(enc, mac_key, aad, iv, ciphertext), tag):
            raise DecryptionFailure("JWE authentication tag mismatch")
        try:
            decryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv)).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = PKCS7(algorithms.AES.block_size).unpadder()
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            raise DecryptionFailure(f"JWE content could not be decrypted: {e}") from e

    if enc in CONTENT_KEY_SIZES:
        try:
            return AESGCM(cek).decrypt(iv, ciphertext + tag, aad)
        except InvalidTag as e:
            raise DecryptionFailure("JWE authentication tag mismatch") from e

    raise UnsupportedAlgorithm(f"Unsupported content encryption: {enc}")


def _compress(header: Mapping[str, Any], plaintext: bytes) -> bytes:
    zip_ = header.get("zip")
    if zip_ is None:
        return plaintext
    if zip_ != DEFLATE:
        raise UnsupportedAlgorithm(f"Unsupported compression: {zip_}")
    compressor = zlib.compressobj(wbits=-15)
    return compressor.compress(plaintext) + compressor.flush()


def _decompress(header: Mapping[str, Any], data: bytes) -> bytes:
    zip_ = header.get("zip")
    if zip_ is None:
        return data
    if zip_ != DEFLATE:
        raise UnsupportedAlgorithm(f"Unsupported compression: {zip_}")
    try:
        return zlib.decompress(data, -15)
    except zlib.error as e:
        raise DecryptionFailure(f"JWE plaintext could not be inflated: {e}") from e


class CryptographyProvider(CryptoProvider):
    """Default provider for RSA and EC keys."""

    def __init__(self) -> None:
        self._signature_algorithms: Dict[str, Algorithm] = {
            name: algorithm
            for name, algorithm in get_default_algorithms().items()
            if name in SIGNATURE_ALGORITHMS
        }

    def _signature_algorithm(self, key: Key, alg: str) -> Algorithm:
        algorithm = self._signature_algorithms.get(alg)
        if algorithm is None or not is_compatible(key.kty, alg):
            raise UnsupportedAlgorithm(f"Unsupported signature algorithm for kty={key.kty}: {alg}")
        return algorithm

    async def sign(self, signing_input: bytes, key: Key, alg: str) -> bytes:
        algorithm = self._signature_algorithm(key, alg)
        _require_private(key, "Signing")
        private_key = _load_key(algorithm, key.parameters)
        return algorithm.sign(signing_input, private_key)

    async def verify(self, signing_input: bytes, signature: bytes, key: Key, alg: str) -> bool:
        algorithm = self._signature_algorithm(key, alg)
        public_key = _load_key(algorithm, key.public_parameters)
        return algorithm.verify(signing_input, public_key, signature)

    async def encrypt(self, token: Token, key: Key, alg: str, enc: str) -> EncryptionResult:
        header: Dict[str, Any] = dict(token.header)
        cek_size = _content_key_size(enc)
        plaintext = _compress(header, token.payload.encode("utf-8"))

        if alg in RSA_KEY_MANAGEMENT and key.kty == "RSA":
            public_key = _load_key(RSAAlgorithm, key.public_parameters)
            cek = os.urandom(cek_size)
            encrypted_key = public_key.encrypt(cek, RSA_KEY_MANAGEMENT[alg]())
        elif (alg == ECDH_DIRECT or alg in ECDH_KEY_WRAP_SIZES) and key.kty == "EC":
            public_key = _load_key(ECAlgorithm, key.public_parameters)
            ephemeral = ec.generate_private_key(public_key.curve)
            header["epk"] = _epk(ephemeral.public_key())
            shared_secret = ephemeral.exchange(ec.ECDH(), public_key)
            if alg == ECDH_DIRECT:
                cek = _concat_kdf(shared_secret, enc, cek_size, header)
                encrypted_key = b""
            else:
                kek = _concat_kdf(shared_secret, alg, ECDH_KEY_WRAP_SIZES[alg], header)
                cek = os.urandom(cek_size)
                encrypted_key = aes_key_wrap(kek, cek)
        else:
            raise UnsupportedAlgorithm(f"Unsupported key management algorithm for kty={key.kty}: {alg}")

        aad = encode_json_segment(header).encode("ascii")
        iv, ciphertext, tag = encrypt_content(enc, cek, plaintext, aad)
        logger.debug(f"Encrypted {len(plaintext)} bytes with alg={alg} enc={enc}")
        return EncryptionResult(
            header=header, encrypted_key=encrypted_key, iv=iv, ciphertext=ciphertext, tag=tag
        )

    async def decrypt(self, jwe: CompactJWE, key: Key, alg: str, enc: str) -> Tuple[Dict[str, Any], str]:
        header = jwe.decoded_header
        if header is None:
            raise DecryptionFailure("JWE protected header is not a JSON object")
        cek_size = _content_key_size(enc)
        _require_private(key, "Decryption")
        encrypted_key = decode_segment(jwe.encrypted_key)

        if alg in RSA_KEY_MANAGEMENT and key.kty == "RSA":
            private_key = _load_key(RSAAlgorithm, key.parameters)
            try:
                cek = private_key.decrypt(encrypted_key, RSA_KEY_MANAGEMENT[alg]())
            except ValueError as e:
                if alg != "RSA1_5":
                    raise DecryptionFailure(f"JWE key could not be decrypted: {e}") from e
                # RFC 7516 section 11.5: continue with a random key so the
                # failure surfaces as a tag mismatch.
                cek = os.urandom(cek_size)
        elif (alg == ECDH_DIRECT or alg in ECDH_KEY_WRAP_SIZES) and key.kty == "EC":
            epk = header.get("epk")
            if not isinstance(epk, dict):
                raise DecryptionFailure("JWE header has no 'epk' for ECDH-ES")
            private_key = _load_key(ECAlgorithm, key.parameters)
            ephemeral_public = _load_key(
                ECAlgorithm,
                {k: v for k, v in epk.items() if k not in PRIVATE_MEMBERS},
            )
            if ephemeral_public.curve.name != private_key.curve.name:
                raise DecryptionFailure("JWE 'epk' curve does not match the key")
            shared_secret = private_key.exchange(ec.ECDH(), ephemeral_public)
            if alg == ECDH_DIRECT:
                cek = _concat_kdf(shared_secret, enc, cek_size, header)
            else:
                kek = _concat_kdf(shared_secret, alg, ECDH_KEY_WRAP_SIZES[alg], header)
                try:
                    cek = aes_key_unwrap(kek, encrypted_key)
                except InvalidUnwrap as e:
                    raise DecryptionFailure("JWE key could not be unwrapped") from e
        else:
            raise UnsupportedAlgorithm(f"Unsupported key management algorithm for kty={key.kty}: {alg}")

        if len(cek) != cek_size:
            raise DecryptionFailure("JWE content encryption key has the wrong length")

        plaintext = decrypt_content(
            enc,
            cek,
            decode_segment(jwe.iv),
            decode_segment(jwe.ciphertext),
            decode_segment(jwe.tag),
            jwe.header.encode("ascii"),
        )
        payload = _decompress(header, plaintext)
        try:
            return dict(header), payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionFailure("JWE plaintext is not UTF-8") from e
