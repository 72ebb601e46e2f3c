"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_DATASET_URL,
    DEFAULT_STAGE_PARENTS,
    PROPOSAL_ID_MARKER_PATTERN,
    TRACKED_STAGES,
)
from .retry import retry_on_rate_limit

__all__ = [
    "DEFAULT_DATASET_URL",
    "DEFAULT_STAGE_PARENTS",
    "PROPOSAL_ID_MARKER_PATTERN",
    "TRACKED_STAGES",
    "retry_on_rate_limit",
]
