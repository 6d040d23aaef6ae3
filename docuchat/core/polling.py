"""Bounded polling for asynchronous remote jobs.

A job status check is retried with exponential backoff until it reports a
result, raises a terminal error, or the retry policy is exhausted.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from docuchat.core.errors import PollingTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff schedule for a polling loop.

    The n-th wait is ``initial_delay * multiplier ** (n - 1)`` seconds,
    capped at max_delay.
    """

    initial_delay: float = 2.0
    multiplier: float = 1.2
    max_delay: float = 10.0
    max_attempts: int = 60

    def wait_strategy(self) -> wait_exponential:
        return wait_exponential(
            multiplier=self.initial_delay,
            exp_base=self.multiplier,
            max=self.max_delay,
        )

    @classmethod
    def from_settings(cls, settings) -> "RetryPolicy":
        """Build the OCR polling policy from settings."""
        return cls(
            initial_delay=settings.ocr_poll_initial_delay,
            multiplier=settings.ocr_poll_multiplier,
            max_delay=settings.ocr_poll_max_delay,
            max_attempts=settings.ocr_poll_max_attempts,
        )


def _log_attempt(description: str) -> Callable[[RetryCallState], None]:
    def before_sleep(state: RetryCallState) -> None:
        outcome = state.outcome
        if outcome is not None and outcome.failed:
            logger.warning(
                f"{description}: attempt {state.attempt_number} failed "
                f"({outcome.exception()}), retrying"
            )
        else:
            logger.debug(f"{description}: not ready after attempt {state.attempt_number}")

    return before_sleep


async def poll_until(
    check: Callable[[], Awaitable[Optional[T]]],
    policy: RetryPolicy,
    *,
    retry_on: Tuple[Type[BaseException], ...] = (),
    description: str = "poll",
) -> T:
    """Call check until it returns a non-None result.

    Args:
        check: Status check; returns None while the job is still running and
            raises for terminal failures
        policy: Backoff schedule and attempt bound
        retry_on: Transient exception types that count as "not ready yet"
        description: Label for log messages

    Returns:
        The first non-None result of check

    Raises:
        PollingTimeoutError: If the policy is exhausted
        Exception: Any exception from check not listed in retry_on
    """
    retry_condition = retry_if_result(lambda result: result is None)
    if retry_on:
        retry_condition = retry_condition | retry_if_exception_type(retry_on)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=policy.wait_strategy(),
        retry=retry_condition,
        before_sleep=_log_attempt(description),
    )

    # AsyncRetrying only awaits coroutine functions, not lambdas returning coroutines
    async def attempt() -> Optional[T]:
        return await check()

    try:
        return await retrying(attempt)
    except RetryError as e:
        last = e.last_attempt
        cause = last.exception() if last.failed else None
        raise PollingTimeoutError(
            f"{description} timed out after {policy.max_attempts} attempts",
            attempts=policy.max_attempts,
        ) from cause
