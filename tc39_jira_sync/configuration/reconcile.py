"""Reconcile Jira authentication and synchronization configuration."""

from pathlib import Path

import structlog

from tc39_jira_sync.configuration.env import Settings
from tc39_jira_sync.configuration.exceptions import JiraAuthenticationConfigurationUndefinedError
from tc39_jira_sync.configuration.models import JiraCredentials, SyncConfig

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def read_api_token(api_token_path: Path) -> str:
    """Read the Jira API token from a local file, stripping surrounding whitespace."""
    try:
        api_token = api_token_path.read_text(encoding="utf-8").strip()
    except FileNotFoundError as exc:
        raise JiraAuthenticationConfigurationUndefinedError(
            f"Jira API token file not found: {api_token_path.absolute()}. Set JIRA_API_TOKEN or provide a token file."
        ) from exc
    if not api_token:
        raise JiraAuthenticationConfigurationUndefinedError(f"Jira API token file is empty: {api_token_path.absolute()}")
    return api_token


async def validate_jira_authentication_configuration(
    jira_user_email: str | None,
    jira_api_token: str | None,
    jira_api_token_path: Path | None,
) -> JiraCredentials:
    """Validates the Jira authentication configuration.

    Args:
        jira_user_email (str | None): The email address of the Jira user the token belongs to.
        jira_api_token (str | None): The Jira API token, if provided directly.
        jira_api_token_path (Path | None): The file to read the Jira API token from otherwise.

    Raises:
        JiraAuthenticationConfigurationUndefinedError: If the user or the token cannot be determined.

    Returns:
        JiraCredentials: The credentials used for basic authentication.
    """
    if not jira_user_email:
        raise JiraAuthenticationConfigurationUndefinedError(
            "No Jira user configured. Please provide the user email (command line option --jira-user-email, environment variable JIRA_USER_EMAIL)."
        )

    if jira_api_token:
        return JiraCredentials(user_email=jira_user_email, api_token=jira_api_token)

    if jira_api_token_path is None:
        raise JiraAuthenticationConfigurationUndefinedError(
            "No Jira API token provided. Please set JIRA_API_TOKEN or JIRA_API_TOKEN_PATH."
        )

    logger.debug("Reading Jira API token from file", api_token_path=str(jira_api_token_path))
    api_token = await read_api_token(jira_api_token_path)
    return JiraCredentials(user_email=jira_user_email, api_token=api_token)


async def reconcile_sync_configuration(settings: Settings, cli_jira_api_url: str | None = None) -> SyncConfig:
    """Build the immutable synchronization configuration from settings and CLI overrides."""
    return SyncConfig(
        jira_api_url=cli_jira_api_url or settings.JIRA_API_URL,
        project_key=settings.JIRA_PROJECT_KEY,
        component=settings.JIRA_COMPONENT,
        issue_type_id=settings.JIRA_ISSUE_TYPE_ID,
        stage_parents=settings.JIRA_STAGE_PARENTS,
        search_page_size=settings.JIRA_SEARCH_PAGE_SIZE,
        min_stage4_edition=settings.MIN_STAGE4_EDITION,
        reference_timezone=settings.REFERENCE_TIMEZONE,
        http_timeout=settings.HTTP_TIMEOUT,
    )
