"""
Retry with exponential backoff for flaky collaborator calls.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from ..models.generation import Attempt, FailureInfo, RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryObserver = Callable[[int, FailureInfo], None]
Sleep = Callable[[float], Awaitable[None]]

# Status codes worth another attempt when callers opt into selective retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    on_retry: Optional[RetryObserver] = None,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Run ``operation`` up to ``policy.max_retries`` times.

    After each failed attempt except the last, ``on_retry`` is called with
    the 1-based attempt number and the normalized failure, then the task
    sleeps ``min(base * 2**index, max)`` milliseconds. The final failure is
    re-raised unchanged. An exception from ``on_retry`` is logged and
    ignored so it cannot end the loop early.
    """
    policy = policy or RetryPolicy()
    last_error: Optional[BaseException] = None

    for index in range(policy.max_retries):
        attempt = Attempt(index=index)
        try:
            return await operation()
        except Exception as e:
            last_error = e
            attempt.error = FailureInfo.from_exception(e)

        if index == policy.max_retries - 1:
            break

        delay_ms = policy.delay_for(index)
        logger.info(
            f"[Retry] Attempt {index + 1}/{policy.max_retries} failed. "
            f"Retrying after {delay_ms}ms: {attempt.error.message}"
        )

        if on_retry is not None:
            try:
                on_retry(index + 1, attempt.error)
            except Exception as observer_error:
                logger.warning(f"[Retry] Observer raised, ignoring: {observer_error}")

        await sleep(delay_ms / 1000)

    raise last_error


def is_retryable_error(failure: FailureInfo) -> bool:
    """Whether a failure looks transient."""
    message = failure.message.lower()
    if "fetch failed" in message or "network" in message:
        return True
    if failure.status_code in RETRYABLE_STATUS_CODES:
        return True
    if "timeout" in message or "etimedout" in message:
        return True
    return False


async def retry_if_retryable(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    on_retry: Optional[RetryObserver] = None,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Try once; fall back to full backoff only when the first failure
    is transient. Non-transient failures propagate immediately.
    """
    try:
        return await operation()
    except Exception as e:
        if not is_retryable_error(FailureInfo.from_exception(e)):
            raise
        logger.info("[Retry] Error is retryable, attempting retry...")
    return await retry_with_backoff(operation, policy, on_retry, sleep)
