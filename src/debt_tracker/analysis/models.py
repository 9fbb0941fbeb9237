"""Result models for snapshot and history analysis."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..graph.models import PropagationEdge
from ..heuristics.models import FileAnalysis
from ..temporal.models import CommitRecord, DeveloperImpact, TimelineSummary


@dataclass(frozen=True)
class RepositorySummary:
    avg_ai_likelihood: float
    avg_technical_debt: float
    avg_cognitive_debt: float
    total_issues: int
    high_risk_files: int
    top_refactor_targets: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Recommendation:
    """Refactor plan for one file.

    impact_share is the file's fraction of the snapshot's total technical
    plus cognitive debt, in [0, 1].
    """

    path: str
    priority: str  # "critical" | "high" | "medium"
    steps: list[str]
    impact_share: float
    issues: list[str] = field(default_factory=list)

    @property
    def impact_percent(self) -> int:
        return round(self.impact_share * 100)


@dataclass(frozen=True)
class SnapshotResult:
    repo_name: str
    total_files: int
    stars: int
    language: str
    files: list[FileAnalysis]
    propagation: list[PropagationEdge]
    summary: RepositorySummary
    recommendations: list[Recommendation] = field(default_factory=list)


@dataclass(frozen=True)
class HistoryResult:
    repo_name: str
    commits: list[CommitRecord]
    developers: list[DeveloperImpact]
    summary: TimelineSummary

    @property
    def degraded_count(self) -> int:
        return sum(1 for c in self.commits if c.degraded)
