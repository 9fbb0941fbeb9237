"""Tests for history orchestration."""

import pytest

from debt_tracker.analysis import HistoryAnalyzer, timeline_from_commits
from debt_tracker.exceptions import EmptyResultError
from debt_tracker.sources import RepoRef
from debt_tracker.temporal import CommitDiff

REF = RepoRef("octo", "widgets")


class TestTimelineFromCommits:
    def test_no_commits(self):
        with pytest.raises(EmptyResultError, match="No commits found"):
            timeline_from_commits("octo/widgets", [])

    def test_result(self, history_result):
        assert history_result.repo_name == "octo/widgets"
        assert [c.is_spike for c in history_result.commits] == [False, True, False]
        assert history_result.summary.spike_count == 1
        assert [d.name for d in history_result.developers] == ["bob", "alice"]
        assert history_result.degraded_count == 0

    def test_degraded_commits_counted(self, neutral_commit):
        broken = CommitDiff(sha="9" * 40, message="x", author="eve", timestamp="", degraded=True)
        result = timeline_from_commits("octo/widgets", [neutral_commit(), broken])
        assert result.degraded_count == 1
        assert result.commits[1].tech_debt == result.commits[0].tech_debt


class TestHistoryAnalyzer:
    def test_requests_capped_count(self, fake_fetcher, config, neutral_commit):
        commits = [neutral_commit(sha=f"{i:040d}") for i in range(40)]
        fetcher = fake_fetcher(commits=commits)
        result = HistoryAnalyzer(fetcher, config).analyze(REF, 100)
        assert len(result.commits) == 30

    def test_default_count(self, fake_fetcher, config, neutral_commit):
        commits = [neutral_commit(sha=f"{i:040d}") for i in range(20)]
        result = HistoryAnalyzer(fake_fetcher(commits=commits), config).analyze(REF)
        assert len(result.commits) == config.default_commit_count

    def test_empty_history(self, fake_fetcher, config):
        with pytest.raises(EmptyResultError):
            HistoryAnalyzer(fake_fetcher(commits=[]), config).analyze(REF, 5)
