"""Commit timeline accumulator.

The running debt scores are a recurrence over the commit sequence, so the
accumulator is written as a fold: ``step(state, commit) -> state`` applied
oldest to newest from SEED_STATE. Replaying the same commits in another
order yields a different trajectory.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import accumulate

from ..math import clamp
from .models import SEED_STATE, AccumulatorState, CommitDiff, CommitRecord, PatchScore
from .patch import score_patch

DEFAULT_MAX_PATCH_FILES = 10
AI_DELTA_DAMPING = 0.5
GROWTH_AMPLIFICATION = 0.3
SHRINK_DAMPING = 0.1


def commit_delta(commit: CommitDiff, max_patch_files: int = DEFAULT_MAX_PATCH_FILES) -> PatchScore:
    """Sum patch scores over the first files of a commit, normalized per file.

    Deltas are divided by the commit's total changed-file count, so files
    beyond the scored prefix dilute rather than contribute.
    """
    if commit.degraded or not commit.files:
        return PatchScore()

    tech = cog = ai = 0.0
    for file_patch in commit.files[:max_patch_files]:
        if not file_patch.patch:
            continue
        score = score_patch(file_patch.patch)
        tech += score.tech_delta
        cog += score.cog_delta
        ai += score.ai_delta

    files = max(commit.files_changed, 1)
    return PatchScore(tech_delta=tech / files, cog_delta=cog / files, ai_delta=ai / files)


def growth_factor(additions: int, deletions: int) -> float:
    """Multiplier applied to prior debt.

    Net growth amplifies by 0.3 per unit; net shrinkage decays by only 0.1.
    """
    net_growth = (additions - deletions) / max(additions + deletions, 1)
    if net_growth > 0:
        return 1 + net_growth * GROWTH_AMPLIFICATION
    return 1 + net_growth * SHRINK_DAMPING


def step(
    state: AccumulatorState,
    commit: CommitDiff,
    max_patch_files: int = DEFAULT_MAX_PATCH_FILES,
) -> AccumulatorState:
    """Advance the running scores by one commit."""
    if commit.degraded:
        return state

    delta = commit_delta(commit, max_patch_files)
    factor = growth_factor(commit.additions, commit.deletions)
    return AccumulatorState(
        tech=clamp(state.tech * factor + delta.tech_delta),
        cog=clamp(state.cog * factor + delta.cog_delta),
        ai=clamp(state.ai + delta.ai_delta * AI_DELTA_DAMPING),
    )


def fold_commits(
    commits: Iterable[CommitDiff],
    seed: AccumulatorState = SEED_STATE,
    max_patch_files: int = DEFAULT_MAX_PATCH_FILES,
) -> list[AccumulatorState]:
    """States after each commit, oldest first (the seed is not included)."""
    states = accumulate(
        commits,
        lambda state, commit: step(state, commit, max_patch_files),
        initial=seed,
    )
    next(states)
    return list(states)


def build_records(
    commits: Sequence[CommitDiff],
    seed: AccumulatorState = SEED_STATE,
    max_patch_files: int = DEFAULT_MAX_PATCH_FILES,
) -> list[CommitRecord]:
    """One CommitRecord per commit carrying the running state after it.

    Spike flags are left unset; see timeline.mark_spikes.
    """
    states = fold_commits(commits, seed, max_patch_files)
    return [
        CommitRecord(
            short_hash=commit.short_hash,
            summary=commit.summary,
            author=commit.author,
            timestamp=commit.timestamp,
            tech_debt=state.tech,
            cog_debt=state.cog,
            ai_contribution=state.ai,
            files_changed=commit.files_changed,
            additions=commit.additions,
            deletions=commit.deletions,
            degraded=commit.degraded,
        )
        for commit, state in zip(commits, states)
    ]
