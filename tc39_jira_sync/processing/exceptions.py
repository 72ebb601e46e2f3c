"""Custom exceptions for the processing module."""

from typing import Any


class DatasetLoadingError(Exception):
    """Raised when the proposals dataset cannot be loaded or contains invalid records."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []
