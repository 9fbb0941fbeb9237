"""History analysis: fold a repository's recent commits into a debt timeline."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from ..config import MAX_HISTORY_COMMITS, TrackerConfig
from ..exceptions import EmptyResultError
from ..logging_config import get_logger
from ..sources.base import SourceFetcher
from ..sources.models import RepoRef
from ..temporal import (
    CommitDiff,
    build_records,
    developer_impact,
    mark_spikes,
    summarize,
)
from .models import HistoryResult

logger = get_logger(__name__)


def timeline_from_commits(
    repo_name: str, commits: Sequence[CommitDiff], max_patch_files: int = 10
) -> HistoryResult:
    """Build the full history result from commits ordered oldest first."""
    if not commits:
        raise EmptyResultError(repo_name, "No commits found")

    records = mark_spikes(build_records(commits, max_patch_files=max_patch_files))
    degraded = sum(1 for r in records if r.degraded)
    if degraded:
        logger.warning(f"{degraded} of {len(records)} commits analyzed without detail")

    return HistoryResult(
        repo_name=repo_name,
        commits=records,
        developers=developer_impact(records),
        summary=summarize(records),
    )


class HistoryAnalyzer:
    def __init__(self, fetcher: SourceFetcher, config: Optional[TrackerConfig] = None):
        self.fetcher = fetcher
        self.config = config or TrackerConfig()

    def analyze(self, ref: RepoRef, commit_count: Optional[int] = None) -> HistoryResult:
        """Fetch up to commit_count recent commits (max 30) and fold them.

        Raises:
            UpstreamUnavailableError: If the commit listing fails
            EmptyResultError: If the repository has no commits
        """
        count = commit_count or self.config.default_commit_count
        count = max(1, min(count, MAX_HISTORY_COMMITS))
        commits = self.fetcher.history(ref, count)
        logger.info(f"Fetched {len(commits)} commits for {ref}")
        return timeline_from_commits(ref.full_name, commits, self.config.max_patch_files)
