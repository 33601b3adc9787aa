"""Unit tests for retry_async (attempt limits, predicates and waits)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fakes import SleepRecorder

from planejar.shared.utils.retry import RetryPolicy, _last_outcome, retry_async


class TransientError(Exception):
    pass


class FatalError(Exception):
    pass


def _transient(exc: BaseException) -> bool:
    return isinstance(exc, TransientError)


@pytest.mark.asyncio
async def test_returns_first_success_without_waiting() -> None:
    func = AsyncMock(return_value="ok")
    sleep = SleepRecorder()

    result = await retry_async(func, 1, key="v", policy=RetryPolicy(max_attempts=3), sleep=sleep)

    assert result == "ok"
    func.assert_awaited_once_with(1, key="v")
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_retries_matching_exceptions_until_success() -> None:
    func = AsyncMock(side_effect=[TransientError(), TransientError(), "ok"])
    sleep = SleepRecorder()

    result = await retry_async(
        func, policy=RetryPolicy(max_attempts=3, base_delay=1.0), retry_on=_transient, sleep=sleep
    )

    assert result == "ok"
    assert func.await_count == 3
    assert sleep.delays == [1.0, 1.0]


@pytest.mark.asyncio
async def test_reraises_last_exception_when_exhausted() -> None:
    func = AsyncMock(side_effect=TransientError("still down"))
    sleep = SleepRecorder()

    with pytest.raises(TransientError, match="still down"):
        await retry_async(func, policy=RetryPolicy(max_attempts=3), retry_on=_transient, sleep=sleep)

    assert func.await_count == 3


@pytest.mark.asyncio
async def test_non_matching_exception_is_not_retried() -> None:
    func = AsyncMock(side_effect=FatalError())
    sleep = SleepRecorder()

    with pytest.raises(FatalError):
        await retry_async(func, policy=RetryPolicy(max_attempts=3), retry_on=_transient, sleep=sleep)

    assert func.await_count == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_retry_on_result_returns_last_result_when_exhausted() -> None:
    """A rejected result on the last attempt is returned, not raised."""
    func = AsyncMock(return_value=None)
    sleep = SleepRecorder()

    result = await retry_async(
        func,
        policy=RetryPolicy(max_attempts=3, base_delay=0.5),
        retry_on_result=lambda r: r is None,
        sleep=sleep,
    )

    assert result is None
    assert func.await_count == 3
    assert sleep.delays == [0.5, 0.5]


@pytest.mark.asyncio
async def test_jitter_stays_within_bounds() -> None:
    func = AsyncMock(side_effect=[TransientError()] * 4 + ["ok"])
    sleep = SleepRecorder()

    await retry_async(
        func,
        policy=RetryPolicy(max_attempts=5, base_delay=1.0, jitter=2.0),
        retry_on=_transient,
        sleep=sleep,
    )

    assert len(sleep.delays) == 4
    assert all(1.0 <= d <= 3.0 for d in sleep.delays)


def test_exhaustion_callback_without_outcome_raises() -> None:
    with pytest.raises(RuntimeError, match="without an attempt outcome"):
        _last_outcome(SimpleNamespace(outcome=None))
