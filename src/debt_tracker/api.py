"""Public API for debt-tracker.

Two synchronous entry points cover the whole system. Both accept an
injected source fetcher (defaulting to the GitHub REST client), result
cache and configuration.

Example:
    >>> from debt_tracker import analyze_snapshot, analyze_history
    >>>
    >>> snapshot = analyze_snapshot("https://github.com/owner/repo")
    >>> snapshot.summary.high_risk_files
    2
    >>> history = analyze_history("owner/repo", commit_count=20)
    >>> history.summary.trend
    'fluctuating'
"""

from __future__ import annotations

from typing import Optional

from .analysis import HistoryAnalyzer, HistoryResult, SnapshotAnalyzer, SnapshotResult
from .cache import ResultCache
from .config import MAX_HISTORY_COMMITS, TrackerConfig, load_config
from .llm import AIVerdict, SecondOpinionClient
from .logging_config import get_logger
from .sources import GitHubClient, SourceFetcher, parse_repository

logger = get_logger(__name__)


def analyze_snapshot(
    repository: str,
    config: Optional[TrackerConfig] = None,
    fetcher: Optional[SourceFetcher] = None,
    cache: Optional[ResultCache] = None,
) -> SnapshotResult:
    """Analyze the files of a repository at its default branch head.

    Args:
        repository: GitHub URL or ``owner/repo``
        config: Settings (loaded from files/env when omitted)
        fetcher: Source to read from (GitHub REST client when omitted)
        cache: Optional result cache

    Returns:
        SnapshotResult with per-file analyses, propagation edges and summary

    Raises:
        InvalidRepositoryError: If the identifier cannot be parsed
        UpstreamUnavailableError: If the repository cannot be listed
        EmptyResultError: If no code file could be analyzed
    """
    ref = parse_repository(repository)
    config = config or load_config()

    def _compute() -> SnapshotResult:
        return _with_fetcher(
            fetcher, config, lambda src: SnapshotAnalyzer(src, config).analyze(ref)
        )

    if cache is None:
        return _compute()
    key = cache.make_key("snapshot", ref.full_name, config.config_hash())
    return cache.get_or_compute(key, _compute)


def analyze_history(
    repository: str,
    commit_count: Optional[int] = None,
    config: Optional[TrackerConfig] = None,
    fetcher: Optional[SourceFetcher] = None,
    cache: Optional[ResultCache] = None,
) -> HistoryResult:
    """Accumulate debt over the most recent commits, oldest first.

    Args:
        repository: GitHub URL or ``owner/repo``
        commit_count: Commits to analyze (default from config, max 30)
        config: Settings (loaded from files/env when omitted)
        fetcher: Source to read from (GitHub REST client when omitted)
        cache: Optional result cache

    Returns:
        HistoryResult with commit records, developer impact and summary

    Raises:
        InvalidRepositoryError: If the identifier cannot be parsed
        UpstreamUnavailableError: If the commit listing fails
        EmptyResultError: If the repository has no commits
    """
    ref = parse_repository(repository)
    config = config or load_config()
    count = max(1, min(commit_count or config.default_commit_count, MAX_HISTORY_COMMITS))

    def _compute() -> HistoryResult:
        return _with_fetcher(
            fetcher, config, lambda src: HistoryAnalyzer(src, config).analyze(ref, count)
        )

    if cache is None:
        return _compute()
    key = cache.make_key("history", ref.full_name, config.config_hash(), count=count)
    return cache.get_or_compute(key, _compute)


def second_opinion(
    code: str,
    filename: Optional[str] = None,
    config: Optional[TrackerConfig] = None,
    client: Optional[SecondOpinionClient] = None,
) -> AIVerdict:
    """Ask the configured LLM whether code looks machine-generated.

    Raises:
        ConfigurationError: If no LLM API key is configured
        SecondaryServiceDegradedError: On rate limiting or exhausted credits
        UpstreamUnavailableError: On any other gateway failure
    """
    if client is not None:
        return client.detect(code, filename)
    with SecondOpinionClient(config or load_config()) as owned:
        return owned.detect(code, filename)


def _with_fetcher(fetcher, config, run):
    if fetcher is not None:
        return run(fetcher)
    with GitHubClient(config) as owned:
        return run(owned)
