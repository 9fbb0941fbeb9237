"""Base formatter interface for debt-tracker output rendering."""

from abc import ABC, abstractmethod

from ..analysis.models import HistoryResult, SnapshotResult


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format_snapshot(self, result: SnapshotResult) -> str:
        """Return formatted string representation of a snapshot."""

    @abstractmethod
    def format_history(self, result: HistoryResult) -> str:
        """Return formatted string representation of a commit timeline."""

    def render_snapshot(self, result: SnapshotResult) -> None:
        print(self.format_snapshot(result))

    def render_history(self, result: HistoryResult) -> None:
        print(self.format_history(result))
