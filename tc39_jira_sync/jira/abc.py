"""Base ABC for Jira clients."""

from abc import ABC, abstractmethod
from typing import Any


class JiraClientBase(ABC):
    """Base ABC for Jira clients."""

    # Issue search
    @abstractmethod
    async def search_issues(self, jql: str, fields: list[str], start_at: int = 0, max_results: int = 100, **kwargs: Any) -> dict[str, Any]:
        """Return one page of issues matching a JQL query."""
        pass

    # Issue CRUD
    @abstractmethod
    async def create_issue(self, summary: str, description: str, parent_key: str, **kwargs: Any) -> str:
        """Create an issue in the tracking project and return its key."""
        pass

    @abstractmethod
    async def update_issue(self, issue_key: str, description: str, parent_key: str, **kwargs: Any) -> None:
        """Replace the description and parent of an existing issue."""
        pass
