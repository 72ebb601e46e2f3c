"""Models for configuration between CLI arguments and environment variables."""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping
from zoneinfo import ZoneInfoNotFoundError

from tc39_jira_sync.configuration.exceptions import StageMappingConfigurationError
from tc39_jira_sync.utils.constants import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_JIRA_API_URL,
    DEFAULT_JIRA_COMPONENT,
    DEFAULT_JIRA_ISSUE_TYPE_ID,
    DEFAULT_JIRA_PROJECT_KEY,
    DEFAULT_MIN_STAGE4_EDITION,
    DEFAULT_REFERENCE_TIMEZONE,
    DEFAULT_SEARCH_PAGE_SIZE,
    DEFAULT_STAGE_PARENTS,
    JIRA_KEY_PATTERN_TEMPLATE,
    TRACKED_STAGES,
)
from tc39_jira_sync.utils.helpers import format_stage, resolve_timezone


@dataclass(frozen=True)
class JiraCredentials:
    """Basic authentication credentials for the Jira REST API."""

    user_email: str
    api_token: str = field(repr=False)


@dataclass(frozen=True)
class SyncConfig:
    """Immutable configuration shared by the synchronization workflow and the Jira adapter.

    The stage mapping is validated on construction: every tracked stage must
    have a parent epic, and the reference time zone must resolve.
    """

    jira_api_url: str = DEFAULT_JIRA_API_URL
    project_key: str = DEFAULT_JIRA_PROJECT_KEY
    component: str = DEFAULT_JIRA_COMPONENT
    issue_type_id: str = DEFAULT_JIRA_ISSUE_TYPE_ID
    stage_parents: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_STAGE_PARENTS))
    search_page_size: int = DEFAULT_SEARCH_PAGE_SIZE
    min_stage4_edition: int = DEFAULT_MIN_STAGE4_EDITION
    reference_timezone: str = DEFAULT_REFERENCE_TIMEZONE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    def __post_init__(self) -> None:
        object.__setattr__(self, "stage_parents", MappingProxyType(dict(self.stage_parents)))
        missing_stages = [format_stage(stage) for stage in TRACKED_STAGES if format_stage(stage) not in self.stage_parents]
        if missing_stages:
            raise StageMappingConfigurationError(missing_stages)
        if self.search_page_size < 1:
            raise ValueError("Search page size must be a positive integer.")
        try:
            resolve_timezone(self.reference_timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown reference time zone: {self.reference_timezone!r}") from exc

    def parent_for_stage(self, stage: float) -> str | None:
        """Return the parent epic key for a stage, or None if the stage is not mapped."""
        return self.stage_parents.get(format_stage(stage))

    @property
    def jql(self) -> str:
        """JQL query selecting every tracked proposal issue."""
        return f'project = "{self.project_key}" and component = "{self.component}"'

    @property
    def key_pattern(self) -> re.Pattern[str]:
        """Compiled pattern matching issue keys of the tracking project."""
        return re.compile(JIRA_KEY_PATTERN_TEMPLATE.format(project_key=re.escape(self.project_key)))
