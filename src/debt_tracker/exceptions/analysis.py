"""Analysis-related exceptions: empty results."""

from .base import DebtTrackerError


class AnalysisError(DebtTrackerError):
    """Base class for analysis-related errors."""
    pass


class EmptyResultError(AnalysisError):
    """Raised when a repository yields nothing that can be analyzed.

    Distinct from an unreachable upstream: the listing succeeded, but no
    file (or commit) survived filtering and fetching.
    """

    def __init__(self, repository: str, reason: str):
        super().__init__(reason, details={"repository": repository})
        self.repository = repository
        self.reason = reason
