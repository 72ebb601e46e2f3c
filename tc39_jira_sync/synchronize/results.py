"""Contains results of application execution."""

from typing import Any

from tc39_jira_sync.schemas.proposal import ProposalModel
from tc39_jira_sync.synchronize.models import SyncDecision


class ProposalSynchronizationResult:
    """Contains the outcome of synchronizing a single proposal."""

    def __init__(
        self,
        proposal: ProposalModel,
        decision: SyncDecision,
        issue_key: str | None = None,
        status_code: int | None = None,
        error: Any = None,
    ) -> None:
        """Initialize the result with the proposal, the decision, and the issue key or error."""
        self.proposal = proposal
        self.decision = decision
        self.issue_key = issue_key
        self.status_code = status_code
        self.error = error

    @property
    def failed(self) -> bool:
        """Whether the create or update call for this proposal failed."""
        return self.error is not None

    def as_error(self) -> dict[str, Any]:
        """Describe a failed result for the run's error report."""
        return {
            "proposal_id": self.proposal.id,
            "proposal_name": self.proposal.name,
            "decision": self.decision.value,
            "issue_key": self.issue_key,
            "status_code": self.status_code,
            "error": self.error,
        }


class AllProposalSynchronizationResults:
    """Contains results of the proposal synchronization workflow for all proposals."""

    def __init__(self, results: list[ProposalSynchronizationResult], index_size: int, dry_run: bool = False) -> None:
        """Initialize the result with a list of proposal synchronization results."""
        self.results = results
        self.index_size = index_size
        self.dry_run = dry_run

    def _count(self, decision: SyncDecision) -> int:
        return sum(1 for result in self.results if result.decision == decision and not result.failed)

    @property
    def created(self) -> int:
        return self._count(SyncDecision.CREATE)

    @property
    def updated(self) -> int:
        return self._count(SyncDecision.UPDATE)

    @property
    def skipped(self) -> int:
        return self._count(SyncDecision.SKIP)

    @property
    def failures(self) -> list[ProposalSynchronizationResult]:
        return [result for result in self.results if result.failed]


class SyncProposalsResult:
    """Contains results of the sync workflow."""

    def __init__(self, proposal_synchronization_results: AllProposalSynchronizationResults, errors: list[dict[str, Any]] | None = None) -> None:
        """Initialize the result with the per-proposal results and errors."""
        self.proposal_synchronization_results = proposal_synchronization_results
        self.errors = errors or []
