"""Fail-fast helpers for bootstrap scripts and examples.

The engine raises typed `SpacetimeError`s and leaves recovery to the caller.
Scripts that cannot do anything useful after a failure can wrap calls with
`must` to log the error and abort the process instead:

    paris = await must(st.create_node("Hub", "Paris", None, 1.0))

Nothing inside the engine uses these helpers.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Coroutine, TypeVar

from sstgraph.errors import SpacetimeError
from sstgraph.logging import setup_logging

logger = setup_logging()

T = TypeVar("T")


async def must(awaitable: Awaitable[T]) -> T:
    """Await an engine call, exiting the process if it fails.

    Raises:
        SystemExit: With status 1 when the call raises a SpacetimeError.
    """
    try:
        return await awaitable
    except SpacetimeError as e:
        logger.critical(f"sst: aborting: {e}")
        raise SystemExit(1) from e


def must_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion outside an event loop, exiting on failure."""
    return asyncio.run(must(coro))
