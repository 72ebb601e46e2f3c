"""Shared constants used across the application."""

import re

# Dataset Constants
# -----------------

DEFAULT_DATASET_URL = "https://tc39.es/dataset/proposals.json"
"""Well-known location of the published TC39 proposals dataset."""

# Jira Constants
# --------------

DEFAULT_JIRA_API_URL = "https://mozilla-hub.atlassian.net"
"""Base URL of the Jira Cloud instance hosting the tracking project."""

DEFAULT_JIRA_PROJECT_KEY = "SJP"
"""Key of the Jira project proposals are tracked in."""

DEFAULT_JIRA_COMPONENT = "TC39 Proposals"
"""Component label attached to every tracked proposal issue."""

DEFAULT_JIRA_ISSUE_TYPE_ID = "10030"
"""Issue type ID of a Story in the tracking project."""

DEFAULT_STAGE_PARENTS: dict[str, str] = {
    "1": "SJP-184",
    "2": "SJP-185",
    "2.7": "SJP-186",
    "3": "SJP-187",
    "4": "SJP-188",
}
"""Parent epic of each tracked stage, keyed by the stage formatted with format_stage()."""

DEFAULT_SEARCH_PAGE_SIZE = 100
"""Number of issues requested per page when searching for tracked issues."""

DEFAULT_HTTP_TIMEOUT = 30.0
"""Timeout in seconds applied to every HTTP request."""

DEFAULT_API_TOKEN_PATH = "apitoken"
"""File the Jira API token is read from when it is not set in the environment."""

# Synchronization Constants
# -------------------------

TRACKED_STAGES: tuple[float, ...] = (1, 2, 2.7, 3, 4)
"""Stages that are synchronized, in ascending order."""

MIN_TRACKED_STAGE = TRACKED_STAGES[0]
"""Proposals below this stage are never synchronized."""

TERMINAL_STAGE = TRACKED_STAGES[-1]
"""Stage of proposals that have shipped in an edition of the standard."""

DEFAULT_MIN_STAGE4_EDITION = 2024
"""Stage 4 proposals from editions before this year are considered historical."""

DEFAULT_REFERENCE_TIMEZONE = "UTC"
"""Time zone note dates are rendered in."""

UNDEFINED_IDENTIFIER = "undefined"
"""Placeholder written into descriptions for proposals that had no identifier."""

# Regex Patterns
PROPOSAL_ID_MARKER_PATTERN = re.compile(r"id: ([A-Za-z0-9.-]+)")
"""Pattern to match the proposal identifier line of a rendered description."""

JIRA_KEY_PATTERN_TEMPLATE = r"\b{project_key}-\d+\b"
"""Pattern template to match Jira issue keys of a project (e.g. SJP-123)."""
