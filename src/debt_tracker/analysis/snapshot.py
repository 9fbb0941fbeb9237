"""Snapshot analysis: fetch a repository's files, score each, link them."""

from __future__ import annotations

import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ..config import TrackerConfig
from ..exceptions import EmptyResultError
from ..graph import build_propagation_graph
from ..heuristics import FileAnalysis, FileRecord, analyze_file
from ..logging_config import get_logger
from ..math import Statistics
from ..sources.base import SourceFetcher
from ..sources.models import RemoteFile, RepoRef
from .models import RepositorySummary, SnapshotResult
from .recommendations import recommend

logger = get_logger(__name__)

TOP_REFACTOR_TARGETS = 3
DEFAULT_WORKERS = 8


def summarize_files(files: Sequence[FileAnalysis]) -> RepositorySummary:
    """Repository-level means, counts and the top refactor targets."""
    ranked = sorted(files, key=lambda f: f.combined_debt, reverse=True)
    return RepositorySummary(
        avg_ai_likelihood=Statistics.mean([f.ai_likelihood for f in files]),
        avg_technical_debt=Statistics.mean([f.technical_debt for f in files]),
        avg_cognitive_debt=Statistics.mean([f.cognitive_debt for f in files]),
        total_issues=sum(len(f.issues) for f in files),
        high_risk_files=sum(1 for f in files if f.is_high_risk),
        top_refactor_targets=[f.path for f in ranked[:TOP_REFACTOR_TARGETS]],
    )


def analyze_records(records: Sequence[FileRecord], workers: int = 1) -> list[FileAnalysis]:
    """Score every record against the texts of all the others.

    Output order matches input order regardless of worker count. A file
    whose scoring fails is logged and left out.
    """
    texts = [r.text for r in records]

    def _score(index: int) -> Optional[FileAnalysis]:
        others = texts[:index] + texts[index + 1:]
        try:
            return analyze_file(records[index], others)
        except Exception as e:
            logger.warning(f"Scoring {records[index].path} failed: {e}")
            return None

    if workers <= 1 or len(records) < 2:
        scored = [_score(i) for i in range(len(records))]
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            scored = list(executor.map(_score, range(len(records))))
    return [f for f in scored if f is not None]


class SnapshotAnalyzer:
    """Runs the per-file estimators and graph builder over one repository."""

    def __init__(self, fetcher: SourceFetcher, config: Optional[TrackerConfig] = None):
        self.fetcher = fetcher
        self.config = config or TrackerConfig()

    def _workers(self, n: int) -> int:
        return max(1, min(self.config.workers or DEFAULT_WORKERS, n))

    def fetch_records(self, remotes: Sequence[RemoteFile]) -> list[FileRecord]:
        """Download listed files in parallel, dropping any that fail."""
        if not remotes:
            return []
        with ThreadPoolExecutor(max_workers=self._workers(len(remotes))) as executor:
            texts = list(executor.map(self.fetcher.fetch_file_text, remotes))

        records = []
        for remote, text in zip(remotes, texts):
            if text is None:
                logger.debug(f"Skipped {remote.path}")
                continue
            records.append(FileRecord(path=remote.path, text=text))
        return records

    def analyze(self, ref: RepoRef) -> SnapshotResult:
        """Analyze the current state of a repository.

        Raises:
            UpstreamUnavailableError: If metadata or the root listing fails
            EmptyResultError: If no code file could be fetched and analyzed
        """
        start = time.perf_counter()
        info = self.fetcher.get_repository(ref)
        remotes = self.fetcher.list_code_files(ref)
        if not remotes:
            raise EmptyResultError(ref.full_name, "No code files found in repository")

        records = self.fetch_records(remotes)
        if not records:
            raise EmptyResultError(ref.full_name, "Could not analyze any files")
        logger.info(
            f"Fetched {len(records)}/{len(remotes)} files in {time.perf_counter() - start:.2f}s"
        )

        files = analyze_records(records, self._workers(len(records)))
        if not files:
            raise EmptyResultError(ref.full_name, "Could not analyze any files")
        contents = {r.path: r.text for r in records}
        propagation = build_propagation_graph(files, contents, self.config.max_edges)
        logger.info(
            f"Scored {len(files)} files, {len(propagation)} edges "
            f"in {time.perf_counter() - start:.2f}s"
        )

        return SnapshotResult(
            repo_name=ref.full_name,
            total_files=len(files),
            stars=info.stars,
            language=info.language or "Unknown",
            files=files,
            propagation=propagation,
            summary=summarize_files(files),
            recommendations=recommend(files),
        )
