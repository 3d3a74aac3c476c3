"""Tests for deadline and batching primitives."""

from __future__ import annotations

import asyncio

import pytest

from nicherank.core.concurrency import BatchPolicy, DeadlineExceeded, run_in_batches, with_deadline


@pytest.mark.asyncio
async def test_with_deadline_returns_value() -> None:
    async def quick() -> int:
        return 7

    assert await with_deadline(quick(), timeout_s=1, label="quick") == 7


@pytest.mark.asyncio
async def test_with_deadline_raises_on_expiry() -> None:
    with pytest.raises(DeadlineExceeded) as exc:
        await with_deadline(asyncio.sleep(5), timeout_s=0.01, label="sleepy")

    assert exc.value.label == "sleepy"
    assert "sleepy timed out" in str(exc.value)


@pytest.mark.asyncio
async def test_run_in_batches_preserves_order_and_bounds_concurrency() -> None:
    running = 0
    peak = 0
    started: list[int] = []

    async def worker(index: int, item: str) -> str:
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        started.append(index)
        await asyncio.sleep(0.01 * (3 - index % 3))
        running -= 1
        return f"{index}:{item}"

    items = ["a", "b", "c", "d", "e", "f", "g"]
    results = await run_in_batches(items, worker, BatchPolicy(size=3, pause_s=0))

    assert results == [f"{i}:{x}" for i, x in enumerate(items)]
    assert peak == 3
    assert sorted(started[:3]) == [0, 1, 2]


@pytest.mark.asyncio
async def test_run_in_batches_pauses_between_batches_only(monkeypatch) -> None:
    sleeps: list[float] = []
    real_sleep = asyncio.sleep

    async def fake_sleep(delay: float, *args, **kwargs):
        sleeps.append(delay)
        await real_sleep(0)

    monkeypatch.setattr("nicherank.core.concurrency.asyncio.sleep", fake_sleep)

    async def worker(index: int, item: int) -> int:
        return item

    await run_in_batches(list(range(7)), worker, BatchPolicy(size=3, pause_s=1.5))

    assert sleeps == [1.5, 1.5]


def test_batch_policy_validation() -> None:
    with pytest.raises(ValueError):
        BatchPolicy(size=0)
    with pytest.raises(ValueError):
        BatchPolicy(pause_s=-1)
