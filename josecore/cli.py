"""Command line interface for signing, verifying, encrypting and decrypting tokens."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

from josecore.compact import CompactJWS, decode_compact_or_none
from josecore.config import load_config
from josecore.errors import JoseError
from josecore.keys import KeySet, load_keyset
from josecore.operations import (
    decrypt_compact_jwe_result,
    encrypt_to_string_result,
    sign_to_string_result,
    unverified_result,
    verified_compact_jws_result,
)
from josecore.result import Result
from josecore.token import Token
from josecore.utils.json import parse_json_object_or_none

app = typer.Typer(help="CLI for JOSE tokens")

KEYS_OPTION = typer.Option(None, "--keys", help="Path to a JWK set document")
NO_CONSTRAINTS_OPTION = typer.Option(
    False, "--no-constraints", help="Allow 'none' and RSA1_5 algorithms"
)


@app.callback()
def main() -> None:
    """josecore CLI entry point."""
    pass


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _load_keys(keys: Optional[Path]) -> KeySet:
    path = keys or load_config().keyset_path
    if path is None:
        _fail("No key set given. Pass --keys or set JOSECORE_KEYSET")
    try:
        return load_keyset(path)
    except OSError as exc:
        _fail(f"Cannot read key set {path}: {exc}")
    except JoseError as exc:
        _fail(f"{exc.kind}: {exc}")


def _enforce(no_constraints: bool) -> bool:
    return load_config().enforce_constraints and not no_constraints


def _unwrap(result: Result):
    if not result.ok:
        _fail(f"{result.error.kind}: {result.error}")
    return result.value


def _echo_token(token: Token) -> None:
    payload = token.decoded_payload
    typer.echo(
        json.dumps(
            {"header": dict(token.header), "payload": token.payload if payload is None else payload},
            indent=2,
        )
    )


@app.command("inspect")
def inspect_token(token: str) -> None:
    """Show the header and payload of a token without verifying it.

    For a JWE only the protected header is shown.
    """
    compact = decode_compact_or_none(token.strip())
    if compact is None:
        _fail("Malformed token")
    if isinstance(compact, CompactJWS):
        _echo_token(_unwrap(unverified_result(compact)))
        return
    header = compact.decoded_header
    if header is None:
        _fail("Malformed JWE header")
    typer.echo(json.dumps({"header": header}, indent=2))


@app.command("sign")
def sign_command(
    payload: str,
    keys: Optional[Path] = KEYS_OPTION,
    header: Optional[str] = typer.Option(None, help="JSON object of header parameters"),
    no_constraints: bool = NO_CONSTRAINTS_OPTION,
) -> None:
    """Sign PAYLOAD and print the compact JWS.

    Example:
        josecore sign --keys jwks.json --header '{"typ":"jwt"}' '{"sub":"alice"}'
    """
    header_claims = {}
    if header is not None:
        header_claims = parse_json_object_or_none(header)
        if header_claims is None:
            _fail("--header must be a JSON object")
    keyset = _load_keys(keys)
    token = Token.from_payload(payload, header_claims)
    typer.echo(_unwrap(asyncio.run(sign_to_string_result(token, keyset, _enforce(no_constraints)))))


@app.command("verify")
def verify_command(
    token: str,
    keys: Optional[Path] = KEYS_OPTION,
    no_constraints: bool = NO_CONSTRAINTS_OPTION,
) -> None:
    """Verify a compact JWS and print its header and payload."""
    keyset = _load_keys(keys)
    result = asyncio.run(
        verified_compact_jws_result(token.strip(), keyset, _enforce(no_constraints))
    )
    _echo_token(_unwrap(result))


@app.command("encrypt")
def encrypt_command(
    payload: str,
    keys: Optional[Path] = KEYS_OPTION,
    header: Optional[str] = typer.Option(None, help="JSON object of header parameters"),
    no_constraints: bool = NO_CONSTRAINTS_OPTION,
) -> None:
    """Encrypt PAYLOAD and print the compact JWE."""
    header_claims = {}
    if header is not None:
        header_claims = parse_json_object_or_none(header)
        if header_claims is None:
            _fail("--header must be a JSON object")
    keyset = _load_keys(keys)
    token = Token.from_payload(payload, header_claims)
    typer.echo(
        _unwrap(asyncio.run(encrypt_to_string_result(token, keyset, _enforce(no_constraints))))
    )


@app.command("decrypt")
def decrypt_command(
    token: str,
    keys: Optional[Path] = KEYS_OPTION,
    no_constraints: bool = NO_CONSTRAINTS_OPTION,
) -> None:
    """Decrypt a compact JWE and print its payload."""
    keyset = _load_keys(keys)
    result = asyncio.run(decrypt_compact_jwe_result(token.strip(), keyset, _enforce(no_constraints)))
    typer.echo(_unwrap(result).payload)


if __name__ == "__main__":
    app()
