"""Result values and the raising/optional calling conventions derived from them."""

from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from .errors import JoseError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an operation: either a value or a ``JoseError``."""

    value: Optional[T] = None
    error: Optional[JoseError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: JoseError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def or_none(self) -> Optional[T]:
        return None if self.error is not None else self.value

    def map(self, fn: Callable[[T], Any]) -> "Result[Any]":
        if self.error is not None:
            return Result.failure(self.error)
        return Result.success(fn(self.value))  # type: ignore[arg-type]


def capture(fn: Callable[..., T]) -> Callable[..., Result[T]]:
    """Turn a raising function into one returning ``Result``.

    Only ``JoseError`` is captured; anything else propagates.
    """

    if inspect.iscoroutinefunction(fn):

        @functools.wraps(fn)
        async def async_wrapper(*args, **kwargs):
            try:
                return Result.success(await fn(*args, **kwargs))
            except JoseError as e:
                return Result.failure(e)

        return async_wrapper

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return Result.success(fn(*args, **kwargs))
        except JoseError as e:
            return Result.failure(e)

    return wrapper


def raising(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Derive the raising convention from a ``*_result`` function."""

    if inspect.iscoroutinefunction(fn):

        @functools.wraps(fn)
        async def async_wrapper(*args, **kwargs):
            return (await fn(*args, **kwargs)).unwrap()

        return async_wrapper

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        return fn(*args, **kwargs).unwrap()

    return wrapper


def optional(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Derive the optional (``None`` on failure) convention from a ``*_result`` function."""

    if inspect.iscoroutinefunction(fn):

        @functools.wraps(fn)
        async def async_wrapper(*args, **kwargs):
            return (await fn(*args, **kwargs)).or_none()

        return async_wrapper

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        return fn(*args, **kwargs).or_none()

    return wrapper


__all__ = ["Result", "capture", "raising", "optional"]
