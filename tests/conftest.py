"""Shared helpers and fixtures for fpipes tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest


def add(a: float, b: float) -> float:
    return a + b


def multiply(a: float, b: float) -> float:
    return a * b


def divide(a: float, b: float) -> float:
    return a / b


def subtract(a: float, b: float) -> float:
    return a - b


async def async_add(a: float, b: float) -> float:
    return add(a, b)


async def async_multiply(a: float, b: float) -> float:
    return multiply(a, b)


async def async_divide(a: float, b: float) -> float:
    return divide(a, b)


async def async_subtract(a: float, b: float) -> float:
    return subtract(a, b)


def delay(seconds: float) -> Callable[[Any], Any]:
    """Step factory: pass the value through after ``seconds``."""

    async def delayed(x: Any) -> Any:
        await asyncio.sleep(seconds)
        return x

    return delayed


def fail(x: Any) -> Any:
    raise ValueError("intentional failure")


async def async_fail(x: Any) -> Any:
    raise ValueError("intentional async failure")


class RecordingTracer:
    def __init__(self) -> None:
        self.events: list[tuple[str, str, Any]] = []

    def on_step_start(self, step_name, input_data):  # type: ignore[no-untyped-def]
        self.events.append(("start", step_name, input_data))

    def on_step_end(self, step_name, result):  # type: ignore[no-untyped-def]
        self.events.append(("end", step_name, result))

    def on_step_error(self, step_name, error):  # type: ignore[no-untyped-def]
        self.events.append(("error", step_name, error))

    def on_promote(self, step_name):  # type: ignore[no-untyped-def]
        self.events.append(("promote", step_name, None))

    @property
    def kinds(self) -> list[str]:
        return [kind for kind, _, _ in self.events]


@pytest.fixture
def tracer() -> RecordingTracer:
    return RecordingTracer()
