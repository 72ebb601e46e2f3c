"""Orchestrates the synchronization of TC39 proposals with Jira."""

import time
from pathlib import Path

import structlog

from tc39_jira_sync.configuration.models import JiraCredentials, SyncConfig
from tc39_jira_sync.jira.adapter import JiraAdapter
from tc39_jira_sync.processing.dataset_loader import DatasetLoader
from tc39_jira_sync.synchronize.index import IdentifierIndex, build_index_from_search, load_index_snapshot, save_index_snapshot
from tc39_jira_sync.synchronize.proposals import sync_proposals
from tc39_jira_sync.synchronize.results import SyncProposalsResult
from tc39_jira_sync.utils.constants import DEFAULT_DATASET_URL

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def run_sync_proposals_workflow(
    config: SyncConfig,
    credentials: JiraCredentials | None,
    dataset_path: Path | None = None,
    dataset_url: str = DEFAULT_DATASET_URL,
    index_snapshot_path: Path | None = None,
    save_index_path: Path | None = None,
    dry_run: bool = False,
    jira_adapter: JiraAdapter | None = None,
    dataset_loader: DatasetLoader | None = None,
) -> SyncProposalsResult:
    """Run the sync workflow: load the dataset, build the identifier index, and synchronize every proposal.

    The index comes from index_snapshot_path when given and from a live Jira
    search otherwise. Index construction failures propagate as
    IndexConstructionError before any proposal is touched.
    """
    if dataset_loader is None:
        dataset_loader = DatasetLoader(dataset_url=dataset_url, timeout=config.http_timeout)
    dataset = await dataset_loader.load_proposals_model(dataset_path)

    if jira_adapter is None:
        if credentials is None:
            raise ValueError("Jira credentials are required to create a Jira adapter")
        jira_adapter = await JiraAdapter.create(config, credentials)

    async with jira_adapter:
        if index_snapshot_path is not None:
            index = load_index_snapshot(index_snapshot_path)
        else:
            index = await build_index_from_search(jira_adapter, config)
        if save_index_path is not None:
            save_index_snapshot(index, save_index_path)

        start_time = time.time()
        sync_results = await sync_proposals(dataset.proposals, index, jira_adapter, config, dry_run=dry_run)
        logger.info("Synchronized proposals with Jira", duration=round(time.time() - start_time, 2), dry_run=dry_run)

    errors = [result.as_error() for result in sync_results.failures]
    return SyncProposalsResult(sync_results, errors=errors)


async def run_export_index_workflow(
    config: SyncConfig,
    credentials: JiraCredentials | None,
    output_path: Path,
    jira_adapter: JiraAdapter | None = None,
) -> IdentifierIndex:
    """Build the identifier index from a live Jira search and save it as a snapshot."""
    if jira_adapter is None:
        if credentials is None:
            raise ValueError("Jira credentials are required to create a Jira adapter")
        jira_adapter = await JiraAdapter.create(config, credentials)
    async with jira_adapter:
        index = await build_index_from_search(jira_adapter, config)
    save_index_snapshot(index, output_path)
    return index
