"""
Run blocking PSP adapter calls off the event loop with a bounded timeout.
"""
import asyncio
import functools
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

from app.exceptions import ProcessorCallError

T = TypeVar("T")


def create_processor_executor(max_workers: int) -> ThreadPoolExecutor:
    """Thread pool reserved for processor calls, separate from the loop's default executor."""
    return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="psp")


async def call_processor(
    func: Callable[..., T],
    *args: Any,
    timeout: float,
    executor: Optional[Executor] = None,
    **kwargs: Any,
) -> T:
    """
    Execute an adapter method in a worker thread.

    A call that exceeds `timeout` seconds raises ProcessorCallError, the same as
    any other processor failure. A call still queued when the timeout fires is
    cancelled; one already running is bounded by the adapter's own HTTP timeout.
    """
    loop = asyncio.get_running_loop()
    try:
        return await asyncio.wait_for(
            loop.run_in_executor(executor, functools.partial(func, *args, **kwargs)),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        raise ProcessorCallError(
            f"Payment processor did not respond within {timeout:g} seconds"
        ) from e
