"""Internal type aliases used across the package."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")
R = TypeVar("R")

# A step function signature: (previous value) -> value or awaitable.
# Kept loose on purpose, the runtime check decides the chain mode.
StepFn = Callable[[Any], Any]
