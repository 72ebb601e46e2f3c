"""Sets up the authenticated httpx client for the Jira REST API."""

import httpx

from tc39_jira_sync.configuration.models import JiraCredentials


async def get_jira_client(jira_api_url: str, credentials: JiraCredentials, timeout: float) -> httpx.AsyncClient:
    """Returns an httpx client authenticated against Jira with basic auth (user email and API token)."""
    if not (credentials.user_email and credentials.api_token):
        raise RuntimeError("Jira basic authentication requires a user email and an API token.")
    return httpx.AsyncClient(
        base_url=jira_api_url.rstrip("/"),
        auth=httpx.BasicAuth(credentials.user_email, credentials.api_token),
        headers={"Accept": "application/json"},
        timeout=timeout,
    )
