"""Concurrency control utilities for async operations."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from nicherank.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class SignalError(RuntimeError):
    """Raised when an external signal source cannot produce a usable value."""


class DeadlineExceeded(SignalError):
    """Raised when a deadline-bound call does not finish in time."""

    def __init__(self, label: str, timeout_s: float) -> None:
        super().__init__(f"{label} timed out after {timeout_s:g}s")
        self.label = label
        self.timeout_s = timeout_s


async def with_deadline(awaitable: Awaitable[T], *, timeout_s: float, label: str) -> T:
    """Await ``awaitable`` under a deadline.

    The pending call is cancelled when the deadline expires. There is no retry.

    Args:
        awaitable: The call to run.
        timeout_s: Deadline in seconds.
        label: Name used in the error message.

    Raises:
        DeadlineExceeded: If the deadline expires first.
    """

    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_s)
    except asyncio.TimeoutError as e:
        raise DeadlineExceeded(label, timeout_s) from e


@dataclass(frozen=True)
class BatchPolicy:
    """Backpressure policy for fan-out over many items."""

    size: int = 3
    pause_s: float = 1.0

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError("batch size must be >= 1")
        if self.pause_s < 0:
            raise ValueError("batch pause must be >= 0")


async def run_in_batches(
    items: Sequence[T],
    worker: Callable[[int, T], Awaitable[R]],
    policy: BatchPolicy,
) -> list[R]:
    """Run ``worker(index, item)`` over ``items`` in consecutive concurrent batches.

    Items inside a batch run concurrently; the scheduler sleeps ``policy.pause_s`` between
    batches (never after the last one). Output order matches input order.
    """

    results: list[R] = []
    for start in range(0, len(items), policy.size):
        batch = items[start : start + policy.size]
        logger.debug(
            "Running batch",
            extra={"batch_start": start, "batch_len": len(batch), "total": len(items)},
        )
        batch_results = await asyncio.gather(
            *(worker(start + offset, item) for offset, item in enumerate(batch))
        )
        results.extend(batch_results)

        if start + policy.size < len(items) and policy.pause_s > 0:
            await asyncio.sleep(policy.pause_s)

    return results
