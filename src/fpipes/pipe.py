"""Pipe: chain step functions over one value, synchronous or not.

A chain starts with ``start(value)`` and grows one step at a time with
``.pipe(step)`` (or ``>>``). ``.end()`` returns the current value.

Two immutable handle types carry the chain:

    Pipe          concrete mode; steps run immediately, ``end()`` returns the value.
    DeferredPipe  deferred mode; steps run when the chain is awaited,
                  ``end()`` returns an awaitable.

A concrete chain becomes deferred as soon as a step returns an awaitable, and
stays deferred for every later step. Awaitables returned by steps are
flattened, so the held value is never an awaitable of an awaitable.

Typing:
    The overloads on ``start`` and ``pipe`` pick ``Pipe`` or ``DeferredPipe``
    from the step's declared return type. Python has no conditional types, so
    this is best effort: the runtime check on the actual result decides the
    mode, and a step annotated ``-> Any`` that returns a coroutine still turns
    the chain deferred while a type checker expects a ``Pipe``.
"""

from __future__ import annotations

import dataclasses
import functools
from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass, field
from typing import Any, Generic, overload

from fpipes._types import R, StepFn, T
from fpipes.deferred import Deferred, is_deferred, settle
from fpipes.errors import InvalidStepError
from fpipes.tracer import NULL_TRACER, Tracer, step_name


@dataclass(frozen=True, eq=False, repr=False)
class BasePipe(Generic[T]):
    """Fields and behaviour shared by both pipe modes.

    Attributes:
        _value: The held value, returned as-is by ``end()``.
        _tracer: Tracer notified around every step, inherited by derived pipes.
    """

    _value: Any
    _tracer: Tracer = field(default=NULL_TRACER)

    deferred = False

    @property
    def tracer(self) -> Tracer:
        return self._tracer


class Pipe(BasePipe[T]):
    """Concrete-mode pipe.

    Usage:
        start(2).pipe(lambda x: x + 2).pipe(lambda x: x * 2).end()  # 8
    """

    def end(self) -> T:
        """Return the held value."""

        return self._value

    def use(self, tracer: Tracer) -> Pipe[T]:
        """Return the same pipe with ``tracer`` attached. The original is unchanged."""

        return dataclasses.replace(self, _tracer=tracer)

    @overload
    def pipe(self, step: Callable[[T], Awaitable[R]]) -> DeferredPipe[R]: ...

    @overload
    def pipe(self, step: Callable[[T], R]) -> Pipe[R]: ...

    def pipe(self, step: StepFn) -> Pipe[Any] | DeferredPipe[Any]:
        """Apply ``step`` to the held value now.

        Returns a ``Pipe`` around the result, or a ``DeferredPipe`` if the
        result is awaitable.

        Raises:
            InvalidStepError: If ``step`` is not callable.
            Exception: Whatever ``step`` raises, unchanged.
        """

        _check_step(step)
        name = step_name(step)
        tracer = self._tracer
        tracer.on_step_start(name, self._value)

        try:
            result = step(self._value)
        except Exception as e:
            tracer.on_step_error(name, e)
            raise

        if is_deferred(result):
            tracer.on_promote(name)
            deferred = Deferred(functools.partial(_finish, name, result, tracer))
            return DeferredPipe(deferred, tracer)

        tracer.on_step_end(name, result)
        return Pipe(result, tracer)

    def __rshift__(self, step: StepFn) -> Pipe[Any] | DeferredPipe[Any]:
        """``pipe >> step`` is ``pipe.pipe(step)``."""
        return self.pipe(step)

    def __repr__(self) -> str:
        return f"Pipe({self._value!r})"


@dataclass(frozen=True, eq=False, repr=False)
class DeferredPipe(BasePipe[T]):
    """Deferred-mode pipe.

    Steps chained here are not called by ``pipe()``. They run in order when
    the chain is awaited, each on the resolved result of the previous one.

    Attributes:
        _shared: Re-awaitable view of ``_value`` that steps chain from, so
            several pipes forked off this one share a single upstream run.
    """

    _shared: Deferred[T] | None = None

    deferred = True

    def __post_init__(self) -> None:
        if self._shared is None:
            object.__setattr__(self, "_shared", Deferred.wrap(self._value))

    def end(self) -> Awaitable[T]:
        """Return the held awaitable. Await it for the chain's result."""

        return self._value

    def use(self, tracer: Tracer) -> DeferredPipe[T]:
        """Return the same pipe with ``tracer`` attached.

        The copy shares the upstream run with the original.
        """

        return dataclasses.replace(self, _tracer=tracer)

    @overload
    def pipe(self, step: Callable[[T], Awaitable[R]]) -> DeferredPipe[R]: ...

    @overload
    def pipe(self, step: Callable[[T], R]) -> DeferredPipe[R]: ...

    def pipe(self, step: StepFn) -> DeferredPipe[Any]:
        """Queue ``step`` behind the held awaitable.

        Failures of ``step`` surface when the returned pipe is awaited.

        Raises:
            InvalidStepError: If ``step`` is not callable.
        """

        _check_step(step)
        deferred = Deferred(functools.partial(_chain, self._shared, step, self._tracer))
        return DeferredPipe(deferred, self._tracer)

    def __rshift__(self, step: StepFn) -> DeferredPipe[Any]:
        """``pipe >> step`` is ``pipe.pipe(step)``."""
        return self.pipe(step)

    def __await__(self) -> Generator[Any, None, T]:
        return settle(self._shared).__await__()

    def __repr__(self) -> str:
        return f"DeferredPipe({self._value!r})"


@overload
def start(value: Awaitable[T], *, tracer: Tracer = ...) -> DeferredPipe[T]: ...


@overload
def start(value: T, *, tracer: Tracer = ...) -> Pipe[T]: ...


def start(value: Any, *, tracer: Tracer = NULL_TRACER) -> Pipe[Any] | DeferredPipe[Any]:
    """Begin a chain holding ``value``.

    An awaitable ``value`` starts the chain in deferred mode. It is held
    as-is: ``start(aw).end() is aw``.

    Args:
        value: Initial value, concrete or awaitable.
        tracer: Optional tracer for every step of the chain.
    """
    if is_deferred(value):
        return DeferredPipe(value, tracer)
    return Pipe(value, tracer)


def _check_step(step: Any) -> None:
    if not callable(step):
        raise InvalidStepError(step)


async def _finish(name: str, result: Awaitable[Any], tracer: Tracer) -> Any:
    """Settle the awaitable a concrete step returned."""
    try:
        value = await settle(result)
    except Exception as e:
        tracer.on_step_error(name, e)
        raise
    tracer.on_step_end(name, value)
    return value


async def _chain(upstream: Awaitable[Any], step: StepFn, tracer: Tracer) -> Any:
    """Run one deferred step after its upstream resolves."""
    value = await settle(upstream)
    name = step_name(step)
    tracer.on_step_start(name, value)

    try:
        result = step(value)
        if is_deferred(result):
            result = await settle(result)
    except Exception as e:
        tracer.on_step_error(name, e)
        raise

    tracer.on_step_end(name, result)
    return result
