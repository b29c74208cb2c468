"""fpipes: functional pipes for synchronous and asynchronous steps.

One chain, one value, any mix of plain and awaitable-returning steps.
"""

from fpipes.deferred import Deferred, is_deferred, settle
from fpipes.errors import InvalidStepError, PipeError
from fpipes.pipe import BasePipe, DeferredPipe, Pipe, start
from fpipes.tracer import NullTracer, StdoutTracer, Tracer

__version__ = "0.1.0"

__all__ = [
    "start",
    "Pipe",
    "DeferredPipe",
    "BasePipe",
    "Deferred",
    "is_deferred",
    "settle",
    "Tracer",
    "NullTracer",
    "StdoutTracer",
    "PipeError",
    "InvalidStepError",
]
