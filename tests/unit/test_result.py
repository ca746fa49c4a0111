"""Tests for result values and derived calling conventions."""

import pytest

from josecore.errors import InvalidSignature, MalformedToken
from josecore.result import Result, capture, optional, raising


def _parse(value):
    if value == "bad":
        raise MalformedToken("bad input")
    if value == "bug":
        raise RuntimeError("not a jose error")
    return value.upper()


async def _parse_async(value):
    return _parse(value)


parse_result = capture(_parse)
parse = raising(parse_result)
parse_or_none = optional(parse_result)

parse_async_result = capture(_parse_async)
parse_async = raising(parse_async_result)
parse_async_or_none = optional(parse_async_result)


def test_result_accessors():
    ok = Result.success(1)
    failed = Result.failure(InvalidSignature("no"))

    assert ok.ok and ok.unwrap() == 1 and ok.or_none() == 1
    assert not failed.ok and failed.or_none() is None
    with pytest.raises(InvalidSignature):
        failed.unwrap()


def test_map():
    assert Result.success(2).map(lambda v: v * 2).unwrap() == 4
    failed = Result.failure(MalformedToken("x"))
    assert failed.map(lambda v: v * 2).error is failed.error


def test_sync_conventions():
    assert parse_result("a").value == "A"
    assert isinstance(parse_result("bad").error, MalformedToken)
    assert parse("a") == "A"
    assert parse_or_none("bad") is None
    with pytest.raises(MalformedToken):
        parse("bad")


def test_non_jose_errors_propagate():
    with pytest.raises(RuntimeError):
        parse_result("bug")
    with pytest.raises(RuntimeError):
        parse_or_none("bug")


@pytest.mark.asyncio
async def test_async_conventions():
    assert (await parse_async_result("a")).value == "A"
    assert await parse_async("b") == "B"
    assert await parse_async_or_none("bad") is None
    with pytest.raises(MalformedToken):
        await parse_async("bad")


def test_wrappers_keep_names():
    assert parse_result.__name__ == "_parse"
    assert parse.__name__ == "_parse"
