import asyncio
from typing import Any, Callable

from nicegui import run


async def io_bound(func: Callable, *args, **kwargs) -> Any:
    """Runs a blocking call in a worker thread without stalling the UI loop."""
    try:
        return await run.io_bound(func, *args, **kwargs)
    except RuntimeError:
        # Fallback for testing environments without event loop integration
        return await asyncio.to_thread(func, *args, **kwargs)
