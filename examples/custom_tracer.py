"""Custom tracer that writes JSON lines to a file."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from fpipes import start


class JSONLTracer:
    """Tracer implementation that appends events to a JSONL file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _write(self, record: dict[str, Any]) -> None:
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, default=repr) + "\n")

    def on_step_start(self, step_name, input_data):  # type: ignore[no-untyped-def]
        self._write({"event": "step_start", "step": step_name, "input": input_data})

    def on_step_end(self, step_name, result):  # type: ignore[no-untyped-def]
        self._write({"event": "step_end", "step": step_name, "result": result})

    def on_step_error(self, step_name, error):  # type: ignore[no-untyped-def]
        self._write({"event": "step_error", "step": step_name, "error": str(error)})

    def on_promote(self, step_name):  # type: ignore[no-untyped-def]
        self._write({"event": "promote", "step": step_name})


async def greet(name: str) -> str:
    await asyncio.sleep(0)
    return f"Hello, {name}!"


async def main() -> None:
    tracer = JSONLTracer("./trace.jsonl")
    result = await start(" fpipes ", tracer=tracer).pipe(str.strip).pipe(greet).pipe(str.upper)
    print(result)


if __name__ == "__main__":
    asyncio.run(main())
