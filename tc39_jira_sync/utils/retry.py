"""Retry decorator for handling Jira API rate limits.

Only rate-limit rejections (HTTP 429) are retried. Every other failure is
raised to the caller on the first attempt.
"""

import asyncio
import functools
from typing import Any, Callable, TypeVar

import structlog

from tc39_jira_sync.jira.exceptions import JiraRateLimitExceeded

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def retry_on_rate_limit(
    max_retries: int = 5,
    initial_delay: float = 5.0,
    max_delay: float = 120.0,
    exponential_base: float = 2.0,
) -> Callable[[F], F]:
    """Decorator for retrying async functions when Jira rate limits them.

    The delay honors the Retry-After value carried by the exception when Jira
    sends one, and otherwise backs off exponentially.

    Args:
        max_retries: Maximum number of retry attempts (default: 5)
        initial_delay: Initial delay in seconds between retries (default: 5.0)
        max_delay: Maximum delay in seconds between retries (default: 120.0)
        exponential_base: Base for exponential backoff calculation (default: 2.0)

    Returns:
        Decorated function with retry logic

    Example:
        @retry_on_rate_limit()
        async def update_issue(key: str, description: str):
            ...
    """

    def decorator(func: F) -> F:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"Function {func.__name__} decorated with @retry_on_rate_limit must be async.")

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except JiraRateLimitExceeded as e:
                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for Jira rate limit error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            url=e.url,
                        )
                        raise

                    wait_time = min(e.retry_after if e.retry_after is not None else delay, max_delay)
                    logger.warning(
                        f"Jira rate limit exceeded, waiting {wait_time} seconds",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        wait_time=wait_time,
                    )
                    await asyncio.sleep(wait_time)
                    delay = min(delay * exponential_base, max_delay)

        return async_wrapper  # type: ignore

    return decorator
