"""Tracer protocol and built-in StdoutTracer.

Tracers are opt-in. A pipe with no tracer attached runs silently.
Custom tracers implement the Tracer protocol, no base class inheritance required.

Hooks are plain (not async) methods: concrete steps never suspend, so the
tracer must not either. In deferred mode the hooks fire when the step actually
runs, which is when the chain is awaited.
"""

from __future__ import annotations

import sys
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Tracer(Protocol):
    """Protocol for pipe tracers.

    Using Protocol (not ABC) so any object with matching methods works.
    """

    def on_step_start(self, step_name: str, input_data: Any) -> None: ...
    def on_step_end(self, step_name: str, result: Any) -> None: ...
    def on_step_error(self, step_name: str, error: Exception) -> None: ...
    def on_promote(self, step_name: str) -> None: ...


class NullTracer:
    """Default tracer that does nothing."""

    def on_step_start(self, step_name: str, input_data: Any) -> None:
        pass

    def on_step_end(self, step_name: str, result: Any) -> None:
        pass

    def on_step_error(self, step_name: str, error: Exception) -> None:
        pass

    def on_promote(self, step_name: str) -> None:
        pass


NULL_TRACER = NullTracer()


class StdoutTracer:
    """Simple tracer that prints to stderr. Useful for development.

    Usage:
        start(2, tracer=StdoutTracer()).pipe(add_two).end()
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def on_step_start(self, step_name: str, input_data: Any) -> None:
        print(f"  → {step_name}", file=sys.stderr, end="")
        if self.verbose:
            print(f" (input: {_truncate(input_data)})", file=sys.stderr, end="")
        print(file=sys.stderr)

    def on_step_end(self, step_name: str, result: Any) -> None:
        print(f"  ✓ {step_name}", file=sys.stderr, end="")
        if self.verbose:
            print(f" (result: {_truncate(result)})", file=sys.stderr, end="")
        print(file=sys.stderr)

    def on_step_error(self, step_name: str, error: Exception) -> None:
        print(f"  ✗ {step_name} FAILED: {error}", file=sys.stderr)

    def on_promote(self, step_name: str) -> None:
        print(f"  ⇢ {step_name} returned an awaitable, chain is now deferred", file=sys.stderr)


def step_name(step: Any) -> str:
    """Best-effort display name for a step function."""
    name = getattr(step, "__qualname__", None) or getattr(step, "__name__", None)
    return name if isinstance(name, str) else repr(step)


def _truncate(obj: Any, max_len: int = 80) -> str:
    s = repr(obj)
    return s[:max_len] + "..." if len(s) > max_len else s
