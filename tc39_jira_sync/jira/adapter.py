"""Jira client adapter for the httpx library."""

from types import TracebackType
from typing import Any, Self

import httpx
import structlog

from tc39_jira_sync.configuration.models import JiraCredentials, SyncConfig
from tc39_jira_sync.utils.retry import retry_on_rate_limit

from .abc import JiraClientBase
from .client import get_jira_client
from .exceptions import JiraRateLimitExceeded, JiraRequestError

logger = structlog.get_logger(__name__)

SEARCH_PATH = "/rest/api/2/search"
ISSUE_PATH = "/rest/api/2/issue"


def extract_error_payload(response: httpx.Response) -> Any:
    """Extract Jira's error details from a response, falling back to the raw text."""
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict):
        errors = {k: v for k, v in data.items() if k in ("errorMessages", "errors") and v}
        if errors:
            return errors
    return data


def parse_retry_after(response: httpx.Response) -> float | None:
    """Return the Retry-After header in seconds, or None if it is absent or not numeric."""
    retry_after = response.headers.get("retry-after")
    if retry_after is None:
        return None
    try:
        return float(retry_after)
    except ValueError:
        logger.warning("Invalid retry-after header value", retry_after=retry_after)
        return None


class JiraAdapter(JiraClientBase):
    """Jira client adapter for the httpx library.

    Every request must answer with its expected status code; anything else is
    raised as a JiraRequestError carrying the status and Jira's error payload.
    """

    def __init__(self, client: httpx.AsyncClient, config: SyncConfig) -> None:
        """Initialize the Jira client adapter with an already-initialized client."""
        self.client = client
        self.config = config

    @classmethod
    async def create(cls, config: SyncConfig, credentials: JiraCredentials) -> Self:
        """Create a new Jira client adapter.

        Args:
            config: Synchronization configuration (API URL, project layout, timeout)
            credentials: Basic authentication credentials

        Returns:
            Configured JiraAdapter instance
        """
        logger.info("Creating client for Jira instance", jira_api_url=config.jira_api_url, user=credentials.user_email)
        client = await get_jira_client(config.jira_api_url, credentials, config.http_timeout)
        return cls(client, config)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _send(self, method: str, url: str, expected_status: int, payload: dict[str, Any]) -> httpx.Response:
        """Send a JSON request and raise unless Jira answers with the expected status."""
        response = await self.client.request(method, url, json=payload)
        if response.status_code == expected_status:
            return response
        errors = extract_error_payload(response)
        if response.status_code == 429:
            raise JiraRateLimitExceeded(method, url, response.status_code, errors, retry_after=parse_retry_after(response))
        raise JiraRequestError(method, url, response.status_code, errors)

    # Issue search
    @retry_on_rate_limit()
    async def search_issues(self, jql: str, fields: list[str], start_at: int = 0, max_results: int = 100, **kwargs: Any) -> dict[str, Any]:
        """Return one page of issues matching a JQL query."""
        payload = {
            "expand": [],
            "fields": fields,
            "jql": jql,
            "maxResults": max_results,
            "startAt": start_at,
            **kwargs,
        }
        response = await self._send("POST", SEARCH_PATH, 200, payload)
        return response.json()

    # Issue CRUD
    @retry_on_rate_limit()
    async def create_issue(self, summary: str, description: str, parent_key: str, **kwargs: Any) -> str:
        """Create a story in the tracking project under the given parent epic and return its key."""
        payload = {
            "fields": {
                "project": {"key": self.config.project_key},
                "parent": {"key": parent_key},
                "summary": summary,
                "issuetype": {"id": self.config.issue_type_id},
                "description": description,
                "components": [{"name": self.config.component}],
                **kwargs,
            }
        }
        response = await self._send("POST", ISSUE_PATH, 201, payload)
        try:
            issue_key = response.json()["key"]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Jira created an issue but did not return its key", status_code=response.status_code, body=response.text)
            raise JiraRequestError("POST", ISSUE_PATH, response.status_code, response.text or response.reason_phrase) from exc
        if not isinstance(issue_key, str) or not issue_key:
            raise JiraRequestError("POST", ISSUE_PATH, response.status_code, response.text)
        return issue_key

    @retry_on_rate_limit()
    async def update_issue(self, issue_key: str, description: str, parent_key: str, **kwargs: Any) -> None:
        """Replace the description and reassign the parent epic of an existing issue.

        The summary is only ever set when the issue is created.
        """
        payload = {
            "fields": {
                "parent": {"key": parent_key},
                **kwargs,
            },
            "update": {
                "description": [{"set": description}],
            },
        }
        await self._send("PUT", f"{ISSUE_PATH}/{issue_key}", 204, payload)
