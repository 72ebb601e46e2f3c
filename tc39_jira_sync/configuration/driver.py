"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio
from pathlib import Path

from tc39_jira_sync.configuration import reconcile
from tc39_jira_sync.configuration.env import Settings
from tc39_jira_sync.configuration.models import JiraCredentials, SyncConfig


def get_sync_config(settings: Settings, jira_api_url: str | None = None) -> SyncConfig:
    """Synchronously get the reconciled synchronization configuration."""
    return asyncio.run(reconcile.reconcile_sync_configuration(settings, cli_jira_api_url=jira_api_url))


def get_jira_credentials(
    settings: Settings,
    jira_user_email: str | None = None,
    jira_api_token_path: Path | None = None,
) -> JiraCredentials:
    """Synchronously get the Jira credentials, preferring CLI values over settings."""
    return asyncio.run(
        reconcile.validate_jira_authentication_configuration(
            jira_user_email=jira_user_email or settings.JIRA_USER_EMAIL,
            jira_api_token=settings.JIRA_API_TOKEN,
            jira_api_token_path=jira_api_token_path or settings.JIRA_API_TOKEN_PATH,
        )
    )
