"""Tests for typed claim accessors."""

from datetime import datetime, timezone

from josecore.token import Token


def test_registered_header_parameters():
    token = Token.from_payload(
        "",
        {
            "alg": "RSA-OAEP-256",
            "enc": "A128GCM",
            "zip": "DEF",
            "jku": "https://example.com/jwks",
            "jwk": {"kty": "EC"},
            "x5c": ["MIIB", "MIIC"],
            "x5t#S256": "thumb",
            "crit": ["exp"],
            "cty": "JWT",
        },
    )

    assert token.alg == "RSA-OAEP-256"
    assert token.enc == "A128GCM"
    assert token.zip == "DEF"
    assert token.jku == "https://example.com/jwks"
    assert token.jwk == {"kty": "EC"}
    assert token.x5c == ["MIIB", "MIIC"]
    assert token.x5t_s256 == "thumb"
    assert token.crit == ["exp"]
    assert token.cty == "JWT"
    assert token.kid is None
    assert token.x5u is None


def test_wrong_types_read_as_none():
    token = Token.from_json(
        {"iss": 1, "aud": [1, "a"], "exp": "soon", "iat": True, "jti": None},
        {"alg": 5, "x5c": "single", "jwk": "text"},
    )

    assert token.alg is None
    assert token.x5c is None
    assert token.jwk is None
    assert token.iss is None
    assert token.aud is None
    assert token.exp is None
    assert token.iat is None
    assert token.jti is None


def test_payload_claims():
    token = Token.from_json(
        {
            "iss": "issuer",
            "sub": "subject",
            "aud": "client",
            "exp": 1700000000,
            "nbf": 1600000000,
            "jti": "id-1",
            "client_id": "cli",
        }
    )

    assert token.iss == "issuer"
    assert token.sub == "subject"
    assert token.aud == ["client"]
    assert token.exp == datetime.fromtimestamp(1700000000, tz=timezone.utc)
    assert token.nbf == datetime.fromtimestamp(1600000000, tz=timezone.utc)
    assert token.jti == "id-1"
    assert token.client_id == "cli"


def test_audience_list_is_kept():
    assert Token.from_json({"aud": ["a", "b"]}).aud == ["a", "b"]


def test_non_object_payload_has_no_claims():
    token = Token.from_payload("not json")

    assert token.sub is None
    assert token.aud is None
