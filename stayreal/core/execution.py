"""Background execution context owned by the session bridge."""

from __future__ import annotations

import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, TypeVar

T = TypeVar("T")


class ExecutionContext:
    """Run blocking storage and SDK calls off the event loop.

    The bridge creates one context and hands it to every component that needs
    to leave the loop; ``close`` shuts the worker pool down on teardown.
    """

    def __init__(self, *, max_workers: int = 4, thread_name_prefix: str = "stayreal") -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def run_blocking(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Execute ``func`` on the worker pool and await its result."""
        if self._closed:
            raise RuntimeError("Execution context has been closed.")
        loop = asyncio.get_running_loop()
        call = functools.partial(func, *args, **kwargs)
        return await loop.run_in_executor(self._executor, call)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)

    async def aclose(self) -> None:
        """Stop accepting work and wait for pending calls without blocking the loop."""
        if self._closed:
            return
        self._closed = True
        await asyncio.to_thread(self._executor.shutdown, True)


__all__ = ["ExecutionContext"]
