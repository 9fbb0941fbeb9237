"""Technical Debt Estimator: complexity, nesting, size, duplication, modularity."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Optional

from ..math import clamp
from .models import TechnicalResult
from .rules import ScoringRule, Tier, fold_rules, tiered, when
from .text import TextProfile

LONG_FUNCTION_LINES = 50
MIN_LONG_FUNCTIONS = 3
MAX_COUNTED_LONG_FUNCTIONS = 3
DUPLICATE_WINDOW = 3
DUPLICATE_WINDOW_MIN_CHARS = 30


@dataclass(frozen=True)
class TechnicalSignals:
    cyclomatic_complexity: int
    nesting_depth: int
    lines_of_code: int
    function_count: int
    long_functions: int
    duplicate_blocks: int
    mds: float


def duplicate_block_count(profile: TextProfile) -> int:
    """Distinct windows of three consecutive code lines that occur twice or more.

    Windows made of trivial lines (brace-only closers and the like) are
    ignored via a minimum combined length.
    """
    lines = [line for line in profile.code_lines if len(line) > 1]
    windows: Counter[tuple[str, ...]] = Counter()
    for i in range(len(lines) - DUPLICATE_WINDOW + 1):
        window = tuple(lines[i: i + DUPLICATE_WINDOW])
        if sum(len(line) for line in window) >= DUPLICATE_WINDOW_MIN_CHARS:
            windows[window] += 1
    return sum(1 for c in windows.values() if c >= 2)


def modularity_degradation(profile: TextProfile) -> float:
    """MDS: imports relative to three times the exported surface."""
    return clamp(profile.import_count / (max(profile.export_count, 1) * 3))


def _long_functions(s: TechnicalSignals):
    if s.long_functions < MIN_LONG_FUNCTIONS:
        return None
    return 0.20 * min(s.long_functions, MAX_COUNTED_LONG_FUNCTIONS), "long functions"


TECHNICAL_RULES: tuple[ScoringRule[TechnicalSignals], ...] = (
    ScoringRule(
        "cyclomatic_complexity",
        lambda s: tiered(
            s.cyclomatic_complexity,
            (
                Tier(15, 0.30, "high cyclomatic complexity"),
                Tier(8, 0.18, "moderate cyclomatic complexity"),
                Tier(5, 0.06),
            ),
        ),
    ),
    ScoringRule(
        "nesting_depth",
        lambda s: tiered(
            s.nesting_depth,
            (
                Tier(4, 0.30, "deep nesting"),
                Tier(3, 0.18, "moderate nesting"),
                Tier(2, 0.06),
            ),
        ),
    ),
    ScoringRule(
        "file_size",
        lambda s: tiered(
            s.lines_of_code,
            (
                Tier(300, 0.25, "large file"),
                Tier(200, 0.15, "growing file size"),
                Tier(150, 0.05),
            ),
        ),
    ),
    ScoringRule("long_functions", _long_functions),
    ScoringRule(
        "function_count",
        lambda s: when(s.function_count > 20, 0.10, "too many functions"),
    ),
    ScoringRule(
        "duplicate_blocks",
        lambda s: when(s.duplicate_blocks > 1, 0.15, "duplicate blocks"),
    ),
    ScoringRule(
        "modularity",
        lambda s: when(s.mds > 0.6, 0.10, "poor modularization"),
    ),
)


def _severity_bonus(signals: TechnicalSignals) -> int:
    bonus = 0
    if signals.cyclomatic_complexity > 30:
        bonus += 2
    elif signals.cyclomatic_complexity > 15:
        bonus += 1
    if signals.nesting_depth > 6:
        bonus += 2
    elif signals.nesting_depth > 4:
        bonus += 1
    return bonus


def estimate_technical_debt(
    text: str, profile: Optional[TextProfile] = None
) -> TechnicalResult:
    """Score one file's structural debt.

    Args:
        text: File contents
        profile: Pre-computed profile of text, if the caller has one

    Returns:
        TechnicalResult; technical_debt is clamped to [0, 1]
    """
    profile = profile or TextProfile.from_text(text)

    signals = TechnicalSignals(
        cyclomatic_complexity=1 + profile.branch_count,
        nesting_depth=profile.max_brace_depth,
        lines_of_code=profile.loc,
        function_count=profile.function_count,
        long_functions=sum(
            1 for fn in profile.functions if fn.line_count > LONG_FUNCTION_LINES
        ),
        duplicate_blocks=duplicate_block_count(profile),
        mds=modularity_degradation(profile),
    )
    fold = fold_rules(TECHNICAL_RULES, signals)

    issue_signal_count = len(fold.tags) + _severity_bonus(signals)
    ddp = clamp(issue_signal_count / max(signals.lines_of_code / 100, 1))

    return TechnicalResult(
        technical_debt=clamp(fold.score),
        cyclomatic_complexity=signals.cyclomatic_complexity,
        nesting_depth=signals.nesting_depth,
        lines_of_code=signals.lines_of_code,
        function_count=signals.function_count,
        ddp=ddp,
        mds=signals.mds,
        issues=list(fold.tags),
    )
