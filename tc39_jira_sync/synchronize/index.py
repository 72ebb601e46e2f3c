"""Builds the index of proposal identifiers to Jira issue keys.

The index is built once at the start of a run, either from a bulk export of
the Jira project, from a live paginated search, or from a snapshot saved by an
earlier run. It is never modified afterwards: issues created during a run are
not added to it.
"""

import json
import re
import time
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

import httpx
import structlog

from tc39_jira_sync.configuration.models import SyncConfig
from tc39_jira_sync.jira.abc import JiraClientBase
from tc39_jira_sync.jira.exceptions import JiraRequestError
from tc39_jira_sync.synchronize.exceptions import IndexConstructionError
from tc39_jira_sync.synchronize.models import IndexSource
from tc39_jira_sync.utils.constants import PROPOSAL_ID_MARKER_PATTERN, UNDEFINED_IDENTIFIER

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class IdentifierIndex(Mapping[str, str]):
    """Read-only mapping of proposal identifier to Jira issue key."""

    def __init__(self, mapping: Mapping[str, str], source: IndexSource) -> None:
        self._mapping = MappingProxyType(dict(mapping))
        self.source = source

    def __getitem__(self, identifier: str) -> str:
        return self._mapping[identifier]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(source={self.source.value!r}, size={len(self)})"


def extract_proposal_identifier(text: str | None) -> str | None:
    """Extract the proposal identifier from an 'id: <identifier>' marker in text.

    Returns None if there is no marker or the marker holds the 'undefined' placeholder.
    """
    if not text:
        return None
    match = PROPOSAL_ID_MARKER_PATTERN.search(text)
    if match is None or match.group(1) == UNDEFINED_IDENTIFIER:
        return None
    return match.group(1)


def build_index_from_export(export_text: str, key_pattern: re.Pattern[str]) -> IdentifierIndex:
    """Build the index from a line-oriented bulk export of the Jira project.

    A line contributes an entry only if it holds both an issue key matching
    key_pattern and an identifier marker. When an identifier appears on more
    than one line, the last line wins.
    """
    mapping: dict[str, str] = {}
    for line_number, line in enumerate(export_text.splitlines(), start=1):
        key_match = key_pattern.search(line)
        identifier = extract_proposal_identifier(line)
        if key_match is None or identifier is None:
            continue
        issue_key = key_match.group(0)
        if identifier in mapping and mapping[identifier] != issue_key:
            logger.warning(
                "Identifier appears more than once in export, keeping the last issue key",
                identifier=identifier,
                previous_issue_key=mapping[identifier],
                issue_key=issue_key,
                line_number=line_number,
            )
        mapping[identifier] = issue_key
    logger.info("Built identifier index from export", entry_count=len(mapping))
    return IdentifierIndex(mapping, IndexSource.EXPORT)


async def build_index_from_search(jira_adapter: JiraClientBase, config: SyncConfig) -> IdentifierIndex:
    """Build the index by paging through every tracked issue of the Jira project.

    Pages are requested one after another, advancing by the page size until the
    total reported by Jira is reached.

    Raises:
        IndexConstructionError: If any page cannot be retrieved.
    """
    mapping: dict[str, str] = {}
    start_at = 0
    total: int | None = None
    start_time = time.time()
    logger.info("Fetching tracked issues from Jira", jql=config.jql, page_size=config.search_page_size)
    while total is None or start_at < total:
        try:
            page = await jira_adapter.search_issues(
                jql=config.jql,
                fields=["description"],
                start_at=start_at,
                max_results=config.search_page_size,
            )
        except JiraRequestError as exc:
            logger.error("Could not query tracked issues", start_at=start_at, status_code=exc.status_code, errors=exc.errors)
            raise IndexConstructionError(
                f"Could not query tracked issues at offset {start_at}: status {exc.status_code}",
                status_code=exc.status_code,
                errors=exc.errors,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Could not query tracked issues", start_at=start_at, error=str(exc))
            raise IndexConstructionError(f"Could not query tracked issues at offset {start_at}: {exc}") from exc

        page_total = page.get("total")
        if not isinstance(page_total, int) or isinstance(page_total, bool):
            logger.error("Search page has no usable total", start_at=start_at, total=page_total)
            raise IndexConstructionError(f"Search page at offset {start_at} has no usable total: {page_total!r}")
        total = page_total
        issues = page.get("issues") or []
        logger.debug("Fetched page of tracked issues", start_at=start_at, issue_count=len(issues), total=total)
        start_at += config.search_page_size

        for issue in issues:
            description = (issue.get("fields") or {}).get("description")
            identifier = extract_proposal_identifier(description)
            if identifier is None:
                logger.debug("Tracked issue has no proposal identifier", issue_key=issue.get("key"))
                continue
            mapping[identifier] = issue["key"]

    logger.info(
        "Built identifier index from Jira search",
        entry_count=len(mapping),
        total=total,
        duration=round(time.time() - start_time, 2),
    )
    return IdentifierIndex(mapping, IndexSource.SEARCH)


def save_index_snapshot(index: Mapping[str, str], path: Path) -> None:
    """Write the index as a flat JSON object of identifier to issue key."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(dict(sorted(index.items())), f, indent=2)
        f.write("\n")
    logger.info("Saved identifier index snapshot", path=str(path), entry_count=len(index))


def load_index_snapshot(path: Path) -> IdentifierIndex:
    """Load an index snapshot written by save_index_snapshot."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.error("Failed to read identifier index snapshot", path=str(path), error=str(exc))
        raise IndexConstructionError(f"Failed to read index snapshot {path}: {exc}") from exc
    if not isinstance(data, dict) or not all(isinstance(k, str) and isinstance(v, str) for k, v in data.items()):
        raise IndexConstructionError(f"Index snapshot {path} is not a flat mapping of identifiers to issue keys")
    logger.info("Loaded identifier index snapshot", path=str(path), entry_count=len(data))
    return IdentifierIndex(data, IndexSource.SNAPSHOT)
