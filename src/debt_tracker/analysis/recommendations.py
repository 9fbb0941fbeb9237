"""Refactor plan: prioritized, issue-driven steps for the most indebted files."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Optional

from ..heuristics.models import FileAnalysis
from .models import Recommendation

MAX_RECOMMENDATIONS = 6
MIN_STEPS = 2

CRITICAL_DEBT = 1.2
HIGH_DEBT = 0.7

StepRule = Callable[[FileAnalysis], Optional[str]]


def _has_any(f: FileAnalysis, *tags: str) -> bool:
    return any(tag in f.issues for tag in tags)


def _tagged(step: str, *tags: str) -> StepRule:
    return lambda f: step if _has_any(f, *tags) else None


STEP_RULES: tuple[StepRule, ...] = (
    lambda f: (
        f"Break down complex logic (complexity {f.cyclomatic_complexity}): "
        "extract conditional branches into named helper functions"
        if f.cyclomatic_complexity > 15
        else None
    ),
    lambda f: (
        f"Reduce nesting depth from {f.nesting_depth} to 3 or less "
        "with early returns and guard clauses"
        if f.nesting_depth > 3
        else None
    ),
    lambda f: (
        f"Split large file ({f.lines_of_code} LOC) into focused modules "
        "of under 150 lines each"
        if f.lines_of_code > 300
        else None
    ),
    _tagged(
        "Extract duplicate code blocks into shared, clearly named helpers",
        "duplicate blocks",
        "duplicate code",
    ),
    _tagged(
        "Rename generic variables (data, temp, result) after what they hold",
        "overly generic naming",
        "generic naming",
        "inconsistent naming",
    ),
    _tagged(
        "Wrap async operations in error handling with specific error types",
        "missing error handling",
    ),
    _tagged(
        "Remove comments that restate the code; let names carry the meaning",
        "excessive comments",
        "heavy commenting",
        "redundant comments",
        "restating comments",
    ),
    _tagged(
        "Replace magic numbers with named constants",
        "magic numbers",
    ),
    _tagged(
        "Inline single-use wrapper functions that add indirection without value",
        "unnecessary abstraction",
    ),
    _tagged(
        "Consolidate near-identical functions behind one parameterized helper",
        "structurally uniform functions",
        "similar function structure",
    ),
    _tagged(
        "Move logic repeated across files into one shared module",
        "cross-file clone",
        "shared boilerplate",
    ),
    _tagged(
        "Split modules so each has a single responsibility",
        "poor modularization",
    ),
    lambda f: (
        "Improve readability: separate logical sections and keep formatting consistent"
        if f.metrics.rdi > 0.6
        else None
    ),
    lambda f: (
        "Simplify control flow: name complex conditions and flatten branches"
        if f.metrics.ccd > 0.6
        else None
    ),
)

FALLBACK_STEPS = (
    "Add unit tests covering the critical paths before refactoring",
    "Review function signatures for clarity and type safety",
)


def priority_for(debt: float) -> str:
    """Priority from a file's technical plus cognitive debt (range 0-2)."""
    if debt > CRITICAL_DEBT:
        return "critical"
    if debt > HIGH_DEBT:
        return "high"
    return "medium"


def refactor_steps(f: FileAnalysis) -> list[str]:
    steps = [step for step in (rule(f) for rule in STEP_RULES) if step]
    if len(steps) < MIN_STEPS:
        steps.extend(FALLBACK_STEPS)
    return steps


def recommend(
    files: Sequence[FileAnalysis], limit: int = MAX_RECOMMENDATIONS
) -> list[Recommendation]:
    """Plans for the files with the highest technical + cognitive + AI scores.

    Ties keep the input order. impact_share is 0.0 when the snapshot carries
    no technical or cognitive debt at all.
    """
    total = sum(f.combined_debt for f in files)
    ranked = sorted(files, key=lambda f: f.combined_debt + f.ai_likelihood, reverse=True)
    return [
        Recommendation(
            path=f.path,
            priority=priority_for(f.combined_debt),
            steps=refactor_steps(f),
            impact_share=f.combined_debt / total if total > 0 else 0.0,
            issues=list(f.issues),
        )
        for f in ranked[:limit]
    ]
