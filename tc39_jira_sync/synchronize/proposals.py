"""Contains synchronization logic for TC39 proposals."""

import time
from typing import Mapping

import httpx
import structlog

from tc39_jira_sync.configuration.models import SyncConfig
from tc39_jira_sync.jira.abc import JiraClientBase
from tc39_jira_sync.jira.exceptions import JiraRequestError
from tc39_jira_sync.schemas.proposal import ProposalModel
from tc39_jira_sync.synchronize.description import render_proposal_description
from tc39_jira_sync.synchronize.index import IdentifierIndex
from tc39_jira_sync.synchronize.models import IndexSource, SyncDecision
from tc39_jira_sync.synchronize.results import AllProposalSynchronizationResults, ProposalSynchronizationResult
from tc39_jira_sync.utils.constants import MIN_TRACKED_STAGE, TERMINAL_STAGE
from tc39_jira_sync.utils.helpers import format_stage

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def is_relevant_proposal(proposal: ProposalModel, config: SyncConfig) -> bool:
    """Return whether a proposal should be tracked in Jira at all."""
    if proposal.stage < MIN_TRACKED_STAGE:
        return False
    # Shipped proposals from older editions are not relevant for implementation work.
    if proposal.stage == TERMINAL_STAGE and proposal.edition is not None and proposal.edition < config.min_stage4_edition:
        return False
    if proposal.id is None:
        # These have to be maintained by hand.
        logger.warning("Proposal has no identifier and cannot be synchronized", proposal_name=proposal.name, stage=format_stage(proposal.stage))
        return False
    return True


async def decide_proposal_sync_action(proposal: ProposalModel, index: Mapping[str, str], config: SyncConfig) -> SyncDecision:
    """Decide whether a proposal is skipped, gets a new issue, or updates its existing issue.

    Key is the proposal identifier.
    """
    if not await is_relevant_proposal(proposal, config):
        return SyncDecision.SKIP
    if proposal.id in index:
        return SyncDecision.UPDATE
    if isinstance(index, IdentifierIndex) and index.source != IndexSource.SEARCH:
        # Saved indexes can be older than the dataset.
        logger.warning("Proposal identifier not found in saved index, treating it as new", proposal_id=proposal.id, index_source=index.source.value)
    else:
        logger.info("Proposal not tracked in Jira yet", proposal_id=proposal.id)
    return SyncDecision.CREATE


async def sync_proposal(
    proposal: ProposalModel,
    index: Mapping[str, str],
    jira_adapter: JiraClientBase | None,
    config: SyncConfig,
    dry_run: bool = False,
) -> ProposalSynchronizationResult:
    """Decide what to do with one proposal and, unless dry_run is set, do it.

    Gateway failures are captured in the returned result instead of being raised.
    """
    decision = await decide_proposal_sync_action(proposal, index, config)
    identifier = proposal.id
    if decision == SyncDecision.SKIP or identifier is None:
        return ProposalSynchronizationResult(proposal, SyncDecision.SKIP)

    issue_key = index.get(identifier)
    parent_key = config.parent_for_stage(proposal.stage)
    if parent_key is None:
        logger.error("No parent epic configured for proposal stage", proposal_id=proposal.id, stage=format_stage(proposal.stage))
        return ProposalSynchronizationResult(
            proposal, decision, issue_key=issue_key, error=f"No parent epic configured for stage {format_stage(proposal.stage)}"
        )

    description = render_proposal_description(identifier, proposal.url, proposal.notes, config.reference_timezone)

    if dry_run:
        logger.info("Dry run, not calling Jira", proposal_id=proposal.id, decision=decision.value, issue_key=issue_key, parent_key=parent_key)
        return ProposalSynchronizationResult(proposal, decision, issue_key=issue_key)
    if jira_adapter is None:
        raise ValueError("A Jira adapter is required unless running in dry-run mode")

    try:
        if decision == SyncDecision.CREATE:
            issue_key = await jira_adapter.create_issue(summary=proposal.name, description=description, parent_key=parent_key)
            logger.info("Created issue for proposal", proposal_id=proposal.id, proposal_name=proposal.name, issue_key=issue_key)
        else:
            issue_key = index[identifier]
            await jira_adapter.update_issue(issue_key=issue_key, description=description, parent_key=parent_key)
            logger.info("Updated issue for proposal", proposal_id=proposal.id, issue_key=issue_key, parent_key=parent_key)
    except JiraRequestError as exc:
        logger.error(
            f"Could not {decision.value} issue for proposal",
            proposal_id=proposal.id,
            proposal_name=proposal.name,
            issue_key=issue_key,
            status_code=exc.status_code,
            errors=exc.errors,
        )
        return ProposalSynchronizationResult(proposal, decision, issue_key=issue_key, status_code=exc.status_code, error=exc.errors or str(exc))
    except httpx.HTTPError as exc:
        logger.error(f"Could not {decision.value} issue for proposal", proposal_id=proposal.id, issue_key=issue_key, error=str(exc))
        return ProposalSynchronizationResult(proposal, decision, issue_key=issue_key, error=str(exc))
    return ProposalSynchronizationResult(proposal, decision, issue_key=issue_key)


async def sync_proposals(
    proposals: list[ProposalModel],
    index: Mapping[str, str],
    jira_adapter: JiraClientBase | None,
    config: SyncConfig,
    dry_run: bool = False,
) -> AllProposalSynchronizationResults:
    """For each proposal, decide whether to skip, create, or update, and call the API accordingly.

    Proposals are processed one at a time, in dataset order, and a failure for
    one proposal does not stop the others.
    """
    start_time = time.time()
    logger.info("Processing proposals", proposal_count=len(proposals), index_size=len(index), dry_run=dry_run)
    results: list[ProposalSynchronizationResult] = []
    for proposal in proposals:
        results.append(await sync_proposal(proposal, index, jira_adapter, config, dry_run=dry_run))
    all_results = AllProposalSynchronizationResults(results, index_size=len(index), dry_run=dry_run)
    logger.info(
        "Processed proposals",
        duration=round(time.time() - start_time, 2),
        created=all_results.created,
        updated=all_results.updated,
        skipped=all_results.skipped,
        failed=len(all_results.failures),
    )
    return all_results
