"""Tests for JWK construction."""

import pytest

from josecore.errors import InvalidKey
from josecore.keys import (
    JsonWebKey,
    create_key,
    create_key_or_none,
    create_key_result,
    decode_key,
    decode_key_or_none,
    decode_key_result,
)


def test_create_key_reads_selection_members(jwks_document):
    key = create_key(jwks_document["keys"][0])

    assert isinstance(key, JsonWebKey)
    assert key.kty == "RSA"
    assert key.kid == "-O4Ur3EdjSdevnsO"
    assert key.use == "sig"
    assert key.alg is None
    assert key.key_ops is None
    assert key.is_private


def test_public_parameters_drop_private_members(jwks_document):
    key = create_key(jwks_document["keys"][2])

    assert set(key.public_parameters) == {"kty", "kid", "use", "x", "y", "crv"}
    assert "d" in key.parameters


def test_parameters_are_read_only(jwks_document):
    key = create_key(jwks_document["keys"][0])

    with pytest.raises(TypeError):
        key.parameters["kid"] = "other"


def test_unknown_members_are_kept():
    key = create_key({"kty": "EC", "x-custom": [1, 2], "key_ops": ["verify"]})

    assert key.parameters["x-custom"] == [1, 2]
    assert key.key_ops == ["verify"]
    assert not key.is_private


@pytest.mark.parametrize(
    "parameters",
    [
        {},
        {"kty": 1},
        {"kty": "RSA", "kid": 7},
        {"kty": "RSA", "key_ops": "sign"},
    ],
)
def test_invalid_parameters(parameters):
    with pytest.raises(InvalidKey):
        create_key(parameters)


def test_create_key_rejects_non_mapping():
    with pytest.raises(InvalidKey):
        create_key(["kty", "RSA"])


def test_decode_key():
    key = decode_key('{"kty":"EC","kid":"a","crv":"P-256"}')

    assert key.kid == "a"
    with pytest.raises(InvalidKey):
        decode_key("not json")
    with pytest.raises(InvalidKey):
        decode_key("[]")


def test_result_and_optional_forms():
    assert create_key_or_none({"kty": "oct", "k": "c2VjcmV0"}).kty == "oct"
    assert create_key_or_none({"kid": "no-kty"}) is None
    assert isinstance(create_key_result({"kty": 1}).error, InvalidKey)

    assert decode_key_result('{"kty":"EC"}').value.kty == "EC"
    assert isinstance(decode_key_result("not json").error, InvalidKey)
    assert decode_key_or_none("[]") is None
