"""Deferred values: detection, flattening and a re-awaitable wrapper.

A value is *deferred* when it is awaitable. The check is structural
(``inspect.isawaitable``), so coroutines, ``asyncio.Future``, tasks and any
object with a usable ``__await__`` qualify. An object that only looks like a
deferred value (a ``then`` attribute, ``__await__ = None``) is concrete.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Generator
from typing import Any, Generic

from fpipes._types import T


def is_deferred(value: Any) -> bool:
    """Return True if ``value`` is awaitable."""
    return inspect.isawaitable(value)


async def settle(value: Awaitable[Any]) -> Any:
    """Await ``value`` until the result is no longer awaitable.

    Collapses an awaitable of an awaitable into a single level.
    """
    result = await value
    while is_deferred(result):
        result = await result
    return result


class Deferred(Generic[T]):
    """Awaitable that can be awaited any number of times.

    Wraps a zero-argument factory returning an awaitable. The factory is
    called on the first ``await`` and its awaitable runs inside an asyncio
    future. Later awaits (from the same chain or from pipes forked off it)
    share that future and see the same result or exception. Each await is
    shielded: cancelling one waiter leaves the shared future running for
    the others.

    The factory is not called before the first await, so steps chained in
    deferred mode create no coroutine until the chain is awaited. A step
    that promoted a concrete chain has already been called by then.
    """

    __slots__ = ("_factory", "_future")

    def __init__(self, factory: Callable[[], Awaitable[T]]) -> None:
        self._factory: Callable[[], Awaitable[T]] | None = factory
        self._future: asyncio.Future[T] | None = None

    @classmethod
    def wrap(cls, awaitable: Awaitable[T]) -> Deferred[T]:
        """Wrap an existing awaitable. A Deferred is returned unchanged."""

        if isinstance(awaitable, Deferred):
            return awaitable
        return cls(lambda: awaitable)

    @property
    def done(self) -> bool:
        """True once the awaitable has finished, successfully or not."""

        return self._future is not None and self._future.done()

    def __await__(self) -> Generator[Any, None, T]:
        if self._future is None:
            self._future = asyncio.ensure_future(self._factory())  # type: ignore[misc]
            self._factory = None
        return asyncio.shield(self._future).__await__()

    def __repr__(self) -> str:
        if self._future is None:
            state = "pending"
        elif not self._future.done():
            state = "running"
        elif self._future.cancelled():
            state = "cancelled"
        elif self._future.exception() is not None:
            state = "failed"
        else:
            state = f"result={self._future.result()!r}"
        return f"Deferred({state})"
