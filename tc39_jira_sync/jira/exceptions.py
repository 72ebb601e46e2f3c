"""Contains exceptions raised when talking to the Jira REST API."""

from typing import Any


class JiraRequestError(Exception):
    """Raised when Jira answers a request with an unexpected status code."""

    def __init__(self, method: str, url: str, status_code: int, errors: Any = None) -> None:
        """Initializes the exception with the failed request and Jira's error payload."""
        super().__init__(f"Jira request {method} {url} failed with status {status_code}: {errors}")
        self.method = method
        self.url = url
        self.status_code = status_code
        self.errors = errors


class JiraRateLimitExceeded(JiraRequestError):
    """Raised when Jira rejects a request because of rate limiting (HTTP 429)."""

    def __init__(self, method: str, url: str, status_code: int, errors: Any = None, retry_after: float | None = None) -> None:
        """Initializes the exception with the delay Jira asked us to wait, if any."""
        super().__init__(method, url, status_code, errors)
        self.retry_after = retry_after
