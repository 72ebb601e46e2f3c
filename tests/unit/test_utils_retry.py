"""Unit tests for the rate limit retry decorator."""

from unittest.mock import AsyncMock, patch

import pytest

from tc39_jira_sync.jira.exceptions import JiraRateLimitExceeded, JiraRequestError
from tc39_jira_sync.utils.retry import retry_on_rate_limit


def test_sync_function_is_rejected() -> None:
    """Only coroutine functions can be decorated."""
    with pytest.raises(TypeError):

        @retry_on_rate_limit()
        def not_async() -> None:
            pass


@pytest.mark.asyncio
async def test_backoff_without_retry_after() -> None:
    """Without Retry-After the delay grows exponentially up to the maximum."""
    calls = AsyncMock(side_effect=[JiraRateLimitExceeded("PUT", "/issue", 429)] * 3 + ["done"])

    @retry_on_rate_limit(max_retries=3, initial_delay=1.0, max_delay=3.0)
    async def call() -> str:
        return await calls()

    with patch("tc39_jira_sync.utils.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        assert await call() == "done"

    assert [c.args[0] for c in mock_sleep.await_args_list] == [1.0, 2.0, 3.0]


@pytest.mark.asyncio
async def test_retry_after_is_capped() -> None:
    """A Retry-After longer than the maximum delay is capped."""
    calls = AsyncMock(side_effect=[JiraRateLimitExceeded("PUT", "/issue", 429, retry_after=600.0), "done"])

    @retry_on_rate_limit(max_delay=120.0)
    async def call() -> str:
        return await calls()

    with patch("tc39_jira_sync.utils.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        await call()

    mock_sleep.assert_awaited_once_with(120.0)


@pytest.mark.asyncio
async def test_other_errors_are_not_retried() -> None:
    """Errors other than rate limiting propagate immediately."""
    calls = AsyncMock(side_effect=JiraRequestError("PUT", "/issue", 500, "boom"))

    @retry_on_rate_limit()
    async def call() -> None:
        await calls()

    with pytest.raises(JiraRequestError):
        await call()

    assert calls.await_count == 1
