"""
debt-tracker - Lexical debt estimates for source repositories

Scores each file of a repository for AI likelihood, technical debt and
cognitive debt using regex heuristics over raw text, links files into a
debt propagation graph, and replays recent commits to track how debt
accumulates over time.
"""

__version__ = "0.1.0"

from .api import analyze_history, analyze_snapshot, second_opinion
from .analysis import HistoryResult, RepositorySummary, SnapshotResult
from .config import TrackerConfig, load_config
from .heuristics import FileAnalysis, FileRecord, analyze_file

__all__ = [
    "analyze_snapshot",  # Main entry points
    "analyze_history",
    "second_opinion",
    "analyze_file",  # Per-file scoring without a remote source
    "SnapshotResult",
    "HistoryResult",
    "RepositorySummary",
    "FileAnalysis",
    "FileRecord",
    "TrackerConfig",
    "load_config",
]
