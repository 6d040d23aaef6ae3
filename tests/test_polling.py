"""Tests for bounded polling."""

import httpx
import pytest

from docuchat.core.errors import OCRError, PollingTimeoutError
from docuchat.core.polling import RetryPolicy, poll_until

NO_WAIT = RetryPolicy(initial_delay=0.0, max_delay=0.0, max_attempts=3)


class Counter:
    """Check function returning scripted results."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class TestPollUntil:
    async def test_returns_first_result(self):
        check = Counter(None, None, {"status": "complete"})

        result = await poll_until(check, NO_WAIT)

        assert result == {"status": "complete"}
        assert check.calls == 3

    async def test_timeout_after_max_attempts(self):
        check = Counter(None, None, None, None)

        with pytest.raises(PollingTimeoutError) as excinfo:
            await poll_until(check, NO_WAIT)

        assert excinfo.value.attempts == 3
        assert check.calls == 3

    async def test_terminal_error_propagates_immediately(self):
        check = Counter(OCRError("failed"), "unused")

        with pytest.raises(OCRError):
            await poll_until(check, NO_WAIT, retry_on=(httpx.HTTPError,))

        assert check.calls == 1

    async def test_lambda_returning_coroutine_is_awaited(self):
        check = Counter(None, {"status": "complete"})

        result = await poll_until(lambda: check(), NO_WAIT)

        assert result == {"status": "complete"}
        assert check.calls == 2

    async def test_transient_errors_are_retried(self):
        check = Counter(httpx.ConnectError("reset"), "done")

        assert await poll_until(check, NO_WAIT, retry_on=(httpx.HTTPError,)) == "done"

    async def test_transient_error_on_last_attempt_times_out(self):
        check = Counter(None, None, httpx.ConnectError("reset"))

        with pytest.raises(PollingTimeoutError) as excinfo:
            await poll_until(check, NO_WAIT, retry_on=(httpx.HTTPError,))

        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


class TestRetryPolicy:
    def test_from_settings(self, settings):
        policy = RetryPolicy.from_settings(settings)

        assert policy.multiplier == settings.ocr_poll_multiplier
        assert policy.max_attempts == settings.ocr_poll_max_attempts

    def test_defaults(self):
        policy = RetryPolicy()

        assert (policy.initial_delay, policy.multiplier, policy.max_delay, policy.max_attempts) == (2.0, 1.2, 10.0, 60)
