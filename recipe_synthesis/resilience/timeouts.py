"""
Timeout racing for external calls.

Every cache operation and provider attempt is raced against a timeout: the
call runs as its own task and ``asyncio.wait`` decides which finishes first.
When the timeout wins the task is cancelled and abandoned rather than
awaited, so the caller never blocks past the timeout window even if the
underlying call ignores cancellation.
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationTimeoutError(TimeoutError):
    """
    Raised when an operation loses the race against its timeout.

    Attributes:
        operation: Name of the operation that timed out
        timeout: Timeout in seconds
    """

    def __init__(self, operation: str, timeout: float) -> None:
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} timed out after {timeout:.2f}s")


def _discard_abandoned(task: "asyncio.Task[object]") -> None:
    # Retrieve the outcome so an abandoned failure is not reported as unhandled.
    if not task.cancelled():
        exc = task.exception()
        if exc is not None:
            logger.debug(f"Abandoned task finished with {type(exc).__name__}: {exc}")


async def run_with_timeout(
    awaitable: Awaitable[T],
    timeout: float,
    operation: str = "operation",
) -> T:
    """
    Await ``awaitable`` for at most ``timeout`` seconds.

    Args:
        awaitable: Coroutine or future to run
        timeout: Seconds before the timeout wins the race
        operation: Name used in the timeout error and logs

    Returns:
        The awaitable's result when it finishes first

    Raises:
        OperationTimeoutError: If the timeout fires first
        Exception: Whatever the awaitable raised, when it finishes first
    """
    task = asyncio.ensure_future(awaitable)
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout)
    except asyncio.CancelledError:
        task.cancel()
        task.add_done_callback(_discard_abandoned)
        raise

    if task in done:
        return task.result()

    task.cancel()
    task.add_done_callback(_discard_abandoned)
    raise OperationTimeoutError(operation, timeout)
