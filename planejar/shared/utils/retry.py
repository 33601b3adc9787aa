"""Retry with backoff for calls to the hosted backend.

One utility for every call site: a RetryPolicy (attempts, base delay,
random jitter) plus predicates deciding which exceptions or results are
worth another attempt. Backed by tenacity; waits suspend only the
calling task.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
    wait_random,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt count and delay between attempts.

    The wait before each new attempt is base_delay plus a uniform random
    value in [0, jitter].
    """

    max_attempts: int = 3
    base_delay: float = 0.0
    jitter: float = 0.0

    def wait_strategy(self):
        strategy = wait_fixed(self.base_delay)
        if self.jitter > 0:
            strategy = strategy + wait_random(0, self.jitter)
        return strategy


def _never(_: Any) -> bool:
    return False


def _last_outcome(retry_state: RetryCallState) -> Any:
    """On exhaustion, return the last result or re-raise the last exception."""
    if retry_state.outcome is None:
        raise RuntimeError("retry finished without an attempt outcome")
    return retry_state.outcome.result()


async def retry_async(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    policy: RetryPolicy,
    retry_on: Callable[[BaseException], bool] = _never,
    retry_on_result: Callable[[Any], bool] = _never,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    **kwargs: Any,
) -> T:
    """Call func until it succeeds, a non-retryable outcome occurs, or attempts run out.

    Args:
        func: Coroutine function to call.
        policy: Attempts and delays.
        retry_on: Returns True for exceptions that warrant another attempt.
        retry_on_result: Returns True for results that warrant another attempt.
        sleep: Awaitable sleep (injectable for tests).

    Returns:
        The first accepted result, or the last result once attempts are exhausted.

    Raises:
        The exception from the last attempt when it is not retryable or
        attempts are exhausted.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=policy.wait_strategy(),
        retry=retry_if_exception(retry_on) | retry_if_result(retry_on_result),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        retry_error_callback=_last_outcome,
        sleep=sleep,
    )
    return await retrying(func, *args, **kwargs)
