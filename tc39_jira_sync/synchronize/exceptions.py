"""Custom exceptions for the synchronize module."""


class IndexConstructionError(Exception):
    """Raised when the identifier index cannot be built completely.

    A partial index would make already tracked proposals look new, so callers
    must abort the run instead of synchronizing against it.
    """

    def __init__(self, message: str, status_code: int | None = None, errors: object = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors
