"""Minimal fpipes example: one plain chain, one mixed chain."""

from __future__ import annotations

import asyncio

from fpipes import start


def add_one(x: int) -> int:
    return x + 1


def double(x: int) -> int:
    return x * 2


async def fetch_bonus(x: int) -> int:
    await asyncio.sleep(0.1)
    return x + 100


async def main() -> None:
    print("Plain:", start(3).pipe(add_one).pipe(double).end())

    mixed = start(3) >> add_one >> fetch_bonus >> double
    print("Mixed:", await mixed.end())


if __name__ == "__main__":
    asyncio.run(main())
