"""Async utilities for running blocking HTTP and file calls from the event loop."""

import asyncio
from typing import Any, Callable, TypeVar

T = TypeVar("T")


async def run_sync(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """Run a synchronous function in a thread pool without blocking the event loop.

    Every remote call and file operation made by the sync engine goes
    through here, so these awaits are the only points where handlers yield.

    Args:
        func: Synchronous function to call
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result of func(*args, **kwargs)

    Example:
        client = RemoteClient(config)
        record = await run_sync(client.get_template, record_id)
    """
    return await asyncio.to_thread(func, *args, **kwargs)
