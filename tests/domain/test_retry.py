from __future__ import annotations

import asyncio

import pytest

from reviewsync.domain.retry import retry


def _counter(results: list[int]) -> tuple[list[int], object]:
    calls: list[int] = []

    async def operation() -> int:
        calls.append(1)
        return results[min(len(calls), len(results)) - 1]

    return calls, operation


def test_retry_stops_on_accepted_result() -> None:
    calls, operation = _counter([1, 2, 3])

    result = asyncio.run(retry(5, lambda value: value >= 2, operation))  # type: ignore[arg-type]

    assert result == 2
    assert len(calls) == 2


def test_retry_returns_last_result_when_exhausted() -> None:
    calls, operation = _counter([1, 2, 3, 4])

    result = asyncio.run(retry(2, lambda value: value > 10, operation))  # type: ignore[arg-type]

    assert result == 3
    assert len(calls) == 3


def test_retry_zero_runs_once() -> None:
    calls, operation = _counter([7])

    assert asyncio.run(retry(0, lambda _: False, operation)) == 7  # type: ignore[arg-type]
    assert len(calls) == 1


def test_retry_rejects_negative_retries() -> None:
    async def operation() -> int:
        return 1

    with pytest.raises(ValueError, match="non-negative"):
        asyncio.run(retry(-1, lambda _: True, operation))


def test_retry_propagates_exceptions() -> None:
    async def operation() -> int:
        raise OSError("boom")

    with pytest.raises(OSError, match="boom"):
        asyncio.run(retry(3, lambda _: True, operation))
