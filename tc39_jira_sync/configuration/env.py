"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from tc39_jira_sync.utils.constants import (
    DEFAULT_API_TOKEN_PATH,
    DEFAULT_DATASET_URL,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_JIRA_API_URL,
    DEFAULT_JIRA_COMPONENT,
    DEFAULT_JIRA_ISSUE_TYPE_ID,
    DEFAULT_JIRA_PROJECT_KEY,
    DEFAULT_MIN_STAGE4_EDITION,
    DEFAULT_REFERENCE_TIMEZONE,
    DEFAULT_SEARCH_PAGE_SIZE,
    DEFAULT_STAGE_PARENTS,
)


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False
    HTTP_TIMEOUT: float = DEFAULT_HTTP_TIMEOUT

    # Dataset settings
    DATASET_URL: str = DEFAULT_DATASET_URL

    # Jira API settings
    JIRA_API_URL: str = DEFAULT_JIRA_API_URL
    JIRA_USER_EMAIL: str | None = None
    JIRA_API_TOKEN: str | None = None
    JIRA_API_TOKEN_PATH: Path = Path(DEFAULT_API_TOKEN_PATH)

    # Jira project layout settings
    JIRA_PROJECT_KEY: str = DEFAULT_JIRA_PROJECT_KEY
    JIRA_COMPONENT: str = DEFAULT_JIRA_COMPONENT
    JIRA_ISSUE_TYPE_ID: str = DEFAULT_JIRA_ISSUE_TYPE_ID
    JIRA_STAGE_PARENTS: dict[str, str] = DEFAULT_STAGE_PARENTS
    JIRA_SEARCH_PAGE_SIZE: int = DEFAULT_SEARCH_PAGE_SIZE

    # Synchronization settings
    MIN_STAGE4_EDITION: int = DEFAULT_MIN_STAGE4_EDITION
    REFERENCE_TIMEZONE: str = DEFAULT_REFERENCE_TIMEZONE
