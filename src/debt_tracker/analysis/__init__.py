"""Snapshot and history orchestration over a repository source."""

from .history import HistoryAnalyzer, timeline_from_commits
from .models import HistoryResult, Recommendation, RepositorySummary, SnapshotResult
from .recommendations import recommend
from .snapshot import SnapshotAnalyzer, analyze_records, summarize_files

__all__ = [
    "SnapshotAnalyzer",
    "HistoryAnalyzer",
    "analyze_records",
    "summarize_files",
    "timeline_from_commits",
    "recommend",
    "Recommendation",
    "SnapshotResult",
    "RepositorySummary",
    "HistoryResult",
]
