"""Models used while deciding how to synchronize a proposal."""

from enum import Enum


class SyncDecision(str, Enum):
    """Action taken for a single proposal."""

    SKIP = "skip"
    CREATE = "create"
    UPDATE = "update"


class IndexSource(str, Enum):
    """Where an identifier index was built from."""

    EXPORT = "export"
    SEARCH = "search"
    SNAPSHOT = "snapshot"
