"""Commit-history analysis: patch scoring, the running-debt fold, summaries."""

from .accumulator import build_records, commit_delta, fold_commits, growth_factor, step
from .models import (
    SEED_STATE,
    AccumulatorState,
    CommitDiff,
    CommitRecord,
    DeveloperImpact,
    FilePatch,
    PatchScore,
    Prediction,
    TimelineSummary,
)
from .patch import score_patch
from .timeline import (
    classify_momentum,
    classify_trend,
    developer_impact,
    mark_spikes,
    predict,
    summarize,
)

__all__ = [
    "score_patch",
    "commit_delta",
    "growth_factor",
    "step",
    "fold_commits",
    "build_records",
    "mark_spikes",
    "developer_impact",
    "classify_trend",
    "classify_momentum",
    "predict",
    "summarize",
    "SEED_STATE",
    "AccumulatorState",
    "CommitDiff",
    "CommitRecord",
    "DeveloperImpact",
    "FilePatch",
    "PatchScore",
    "Prediction",
    "TimelineSummary",
]
