"""Package exceptions. Minimal set: exceptions raised by step functions pass through unmodified."""

from __future__ import annotations

from typing import Any


class PipeError(Exception):
    """Base exception for all fpipes errors."""

    pass


class InvalidStepError(PipeError, TypeError):
    """Raised when something that is not callable is chained as a step.

    Attributes:
        step: The rejected object.
    """

    def __init__(self, step: Any) -> None:
        self.step = step
        super().__init__(
            f"Pipe step must be callable, got {type(step).__name__}: {step!r}"
        )
