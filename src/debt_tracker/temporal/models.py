"""Data models for commit-history (timeline) analysis."""

from __future__ import annotations

from dataclasses import dataclass, field

SUMMARY_MAX_CHARS = 80
SHORT_HASH_CHARS = 7


@dataclass(frozen=True)
class FilePatch:
    filename: str
    patch: str  # unified diff hunk text, may be empty for binary files
    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class CommitDiff:
    """One commit with its per-file patches.

    degraded is set when the commit's detail could not be fetched; such a
    commit carries no patches and leaves the running scores untouched.
    """

    sha: str
    message: str
    author: str
    timestamp: str  # ISO 8601 as reported upstream, "" when unknown
    files: list[FilePatch] = field(default_factory=list)
    additions: int = 0
    deletions: int = 0
    degraded: bool = False

    @property
    def files_changed(self) -> int:
        return len(self.files)

    @property
    def short_hash(self) -> str:
        return self.sha[:SHORT_HASH_CHARS]

    @property
    def summary(self) -> str:
        return self.message.split("\n", 1)[0][:SUMMARY_MAX_CHARS]


@dataclass(frozen=True)
class PatchScore:
    tech_delta: float = 0.0
    cog_delta: float = 0.0
    ai_delta: float = 0.0


@dataclass(frozen=True)
class AccumulatorState:
    """Running debt scores threaded from one commit to the next."""

    tech: float
    cog: float
    ai: float


SEED_STATE = AccumulatorState(tech=0.1, cog=0.1, ai=0.05)


@dataclass(frozen=True)
class CommitRecord:
    short_hash: str
    summary: str
    author: str
    timestamp: str
    tech_debt: float
    cog_debt: float
    ai_contribution: float
    files_changed: int
    additions: int
    deletions: int
    is_spike: bool = False
    degraded: bool = False


@dataclass(frozen=True)
class DeveloperImpact:
    name: str
    tech_impact: float
    cog_impact: float
    total_impact: float
    commit_count: int


@dataclass(frozen=True)
class Prediction:
    """Linear extrapolation 5 and 10 commits ahead."""

    tech_debt_5: float
    tech_debt_10: float
    cog_debt_5: float
    cog_debt_10: float


@dataclass(frozen=True)
class TimelineSummary:
    trend: str  # "increasing" | "improving" | "unstable" | "fluctuating"
    momentum: str  # "fast" | "slow" | "stable"
    spike_count: int
    prediction: Prediction
