from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar


T = TypeVar("T")
R = TypeVar("R")


async def gather_indexed(items: Sequence[T], fn: Callable[[T], Awaitable[R]]) -> list[R]:
    """Run ``fn`` over every item concurrently and return results in input order.

    Each task writes into its own slot, so completion order never affects
    where a result lands. ``fn`` is expected to capture its own failures;
    an exception escaping it cancels the siblings and is raised inside an
    ``ExceptionGroup``.
    """
    if not items:
        return []
    slots: list[R | None] = [None] * len(items)

    async def _run(index: int, item: T) -> None:
        slots[index] = await fn(item)

    async with asyncio.TaskGroup() as tg:
        for index, item in enumerate(items):
            tg.create_task(_run(index, item))
    return slots  # type: ignore[return-value]
