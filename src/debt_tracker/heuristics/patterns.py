"""Pattern Detector: lexical signals of AI-assisted authorship.

Two estimates are computed side by side:

- a rule score, where each heuristic adds a fixed weight when its threshold
  is crossed (see PATTERN_RULES);
- weighted_ai, a fixed linear blend of the SUS, PRI and CRS sub-scores with
  generic-identifier density and line-length uniformity.

ai_likelihood = clamp(max(rule_score + 0.05, weighted_ai), 0, 1).
"""

from __future__ import annotations

import math
import re
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Optional

from ..math import Entropy, Statistics, clamp
from .models import PatternResult
from .rules import ScoringRule, Tier, fold_rules, tiered, when
from .text import IDENTIFIER_RE, TextProfile, comment_text

BASE_LIKELIHOOD = 0.05

WEIGHTED_AI_WEIGHTS = {
    "sus": 0.25,
    "pri": 0.20,
    "crs": 0.20,
    "generic_density": 0.15,
    "line_uniformity": 0.20,
}

# Bodies whose erased-identifier shapes match at least this closely count
# as near-duplicates.
NEAR_DUPLICATE_RATIO = 0.9
MIN_BODY_TOKENS = 3
MIN_FUNCTIONS_FOR_SUS = 3
MAX_SHAPE_COMPARISONS = 4000

TOP_TOKENS = 10
MIN_TOKENS_FOR_TDD = 50
MIN_LINES_FOR_SCS = 20
MIN_LINES_FOR_UNIFORMITY = 10
# Line lengths are bucketed by 10 characters; 12 buckets covers 0-120+.
LINE_BUCKET_WIDTH = 10
LINE_BUCKETS = 12
CROSS_FILE_MIN_LINE = 20

SHAPE_KEYWORDS = frozenset(
    {
        "if", "else", "elif", "for", "while", "do", "return", "def", "function",
        "const", "let", "var", "class", "try", "catch", "except", "finally",
        "await", "async", "new", "in", "of", "not", "and", "or", "is", "None",
        "null", "undefined", "true", "false", "True", "False", "self", "this",
        "switch", "case", "break", "continue", "throw", "raise", "yield", "with",
    }
)

ACTION_VERBS = frozenset(
    {
        "get", "gets", "set", "sets", "create", "creates", "initialize", "initializes",
        "init", "return", "returns", "check", "checks", "loop", "loops", "iterate",
        "iterates", "increment", "increments", "decrement", "call", "calls", "define",
        "defines", "import", "imports", "update", "updates", "calculate", "calculates",
        "compute", "computes", "add", "adds", "remove", "removes", "handle", "handles",
        "validate", "validates", "process", "processes", "store", "stores", "fetch",
        "fetches", "convert", "converts", "print", "prints", "log", "logs", "assign",
        "assigns", "declare", "declares", "append", "appends", "save", "saves", "load",
        "loads", "parse", "parses", "render", "renders", "send", "sends", "build", "builds",
    }
)

_SHAPE_TOKEN_RE = re.compile(r"[A-Za-z_]\w*|\d+|\S")
_NUMBER_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class PatternSignals:
    """Inputs to the pattern rules: the profile plus derived sub-scores."""

    profile: TextProfile
    sus: float
    sus_bodies: int
    tdd: float
    token_total: int
    pri: float
    crs: float
    scs: float
    generic_density: float
    line_uniformity: float
    cross_file_share: Optional[float]


# ── Sub-scores ────────────────────────────────────────────────────


def _shape(body: str) -> list[str]:
    """Token sequence with identifiers and numbers erased."""
    shape: list[str] = []
    for token in _SHAPE_TOKEN_RE.findall(body):
        if token in SHAPE_KEYWORDS:
            shape.append(token)
        elif _NUMBER_RE.fullmatch(token):
            shape.append("0")
        elif IDENTIFIER_RE.fullmatch(token):
            shape.append("ID")
        else:
            shape.append(token)
    return shape


def structural_uniformity(profile: TextProfile) -> tuple[float, int]:
    """SUS: fraction of function bodies with a near-duplicate sibling.

    Returns (score, number of bodies considered). Score is 0.0 with fewer
    than three non-trivial bodies.

    Identical shapes are grouped first. Distinct shapes are compared in
    length order, only against shapes short enough to still reach the
    near-duplicate ratio, and at most MAX_SHAPE_COMPARISONS pairs are
    compared per file.
    """
    shapes = [
        tuple(shape) for shape in (_shape(fn.body) for fn in profile.functions)
        if len(shape) >= MIN_BODY_TOKENS
    ]
    if len(shapes) < MIN_FUNCTIONS_FOR_SUS:
        return 0.0, len(shapes)

    counts = Counter(shapes)
    duplicated = {shape for shape, n in counts.items() if n > 1}
    unique = sorted(counts, key=len)
    budget = MAX_SHAPE_COMPARISONS
    matcher = SequenceMatcher(autojunk=False)

    for i, a in enumerate(unique):
        if budget <= 0:
            break
        matcher.set_seq2(a)
        for b in unique[i + 1:]:
            # Lengths only grow from here, so no later shape can match a.
            if 2 * len(a) < NEAR_DUPLICATE_RATIO * (len(a) + len(b)):
                break
            if a in duplicated and b in duplicated:
                continue
            if budget <= 0:
                break
            budget -= 1
            matcher.set_seq1(b)
            if (
                matcher.quick_ratio() >= NEAR_DUPLICATE_RATIO
                and matcher.ratio() >= NEAR_DUPLICATE_RATIO
            ):
                duplicated.update((a, b))

    matched = sum(counts[shape] for shape in duplicated)
    return matched / len(shapes), len(shapes)


def token_distribution_divergence(profile: TextProfile) -> tuple[float, int]:
    """TDD: share of token volume held by the ten most frequent tokens."""
    counts = list(profile.word_counts.values())
    return clamp(Statistics.top_k_share(counts, TOP_TOKENS)), sum(counts)


def pattern_repetition_index(profile: TextProfile) -> float:
    """PRI: distinct lines occurring twice or more, per 10% of code lines."""
    counts = Counter(line for line in profile.code_lines if len(line) > 10)
    repeated = sum(1 for c in counts.values() if c >= 2)
    return clamp(repeated / max(profile.loc * 0.1, 1))


def comment_redundancy(profile: TextProfile) -> float:
    """CRS: fraction of comments that open by restating an action verb."""
    texts = [comment_text(line) for line in profile.comment_lines]
    texts = [t for t in texts if t]
    if not texts:
        return 0.0
    restating = 0
    for t in texts:
        first = t.split()[0].lower().strip(".:,")
        if first in ACTION_VERBS:
            restating += 1
    return restating / len(texts)


def style_consistency(profile: TextProfile) -> float:
    """SCS: 1 minus the coefficient of variation of code line lengths."""
    if profile.loc <= MIN_LINES_FOR_SCS:
        return 0.0
    return clamp(1.0 - Statistics.coefficient_of_variation(profile.code_line_lengths))


def generic_identifier_density(profile: TextProfile) -> float:
    """Generic names per identifier, scaled so 20% generic saturates."""
    return clamp(profile.generic_name_count / max(len(profile.identifiers), 1) * 5)


def line_length_uniformity(profile: TextProfile) -> float:
    """1 minus the entropy of bucketed code line lengths.

    Meaningless for tiny files, which score 0.0.
    """
    if profile.loc < MIN_LINES_FOR_UNIFORMITY:
        return 0.0
    buckets = Counter(
        str(min(length // LINE_BUCKET_WIDTH, LINE_BUCKETS - 1))
        for length in profile.code_line_lengths
    )
    return clamp(1.0 - Entropy.shannon(buckets) / math.log2(LINE_BUCKETS))


def _significant_lines(text: str) -> set[str]:
    lines = set()
    for raw in text.split("\n"):
        stripped = raw.strip()
        if len(stripped) > CROSS_FILE_MIN_LINE:
            lines.add(stripped)
    return lines


def cross_file_share(text: str, others: Sequence[str]) -> Optional[float]:
    """Fraction of this file's significant lines found verbatim in other files.

    None when there is no other file to compare against.
    """
    if not others:
        return None
    mine = _significant_lines(text)
    if not mine:
        return 0.0
    seen: set[str] = set()
    for other in others:
        seen |= mine & _significant_lines(other)
        if len(seen) == len(mine):
            break
    return len(seen) / len(mine)


# ── Rules ─────────────────────────────────────────────────────────


def _generic_naming(s: PatternSignals):
    count = s.profile.generic_name_count
    total = s.profile.total_lines
    if count > total * 0.05:
        return 0.15, "overly generic naming"
    if count >= 3 and count > total * 0.02:
        return 0.08, "generic naming"
    return None


def _cross_file(s: PatternSignals):
    if s.cross_file_share is None:
        return None
    return tiered(
        s.cross_file_share,
        (Tier(0.30, 0.10, "cross-file clone"), Tier(0.15, 0.05, "shared boilerplate")),
    )


PATTERN_RULES: tuple[ScoringRule[PatternSignals], ...] = (
    ScoringRule("generic_naming", _generic_naming),
    ScoringRule(
        "comment_volume",
        lambda s: tiered(
            s.profile.comment_ratio,
            (Tier(0.30, 0.10, "excessive comments"), Tier(0.20, 0.05, "heavy commenting")),
        ),
    ),
    ScoringRule(
        "repeated_lines",
        lambda s: tiered(
            s.profile.repeated_consecutive_lines,
            (Tier(3, 0.15, "duplicate code"), Tier(1, 0.07, "repeated lines")),
        ),
    ),
    ScoringRule(
        "mixed_naming",
        lambda s: when(
            s.profile.camel_case_count > 5 and s.profile.snake_case_count > 5,
            0.10,
            "inconsistent naming",
        ),
    ),
    ScoringRule(
        "deep_indentation",
        lambda s: when(s.profile.max_indent > 16, 0.10, "deep indentation"),
    ),
    ScoringRule(
        "unnecessary_abstraction",
        lambda s: when(
            s.profile.function_count >= 3
            and s.profile.function_count > s.profile.total_lines / 10,
            0.10,
            "unnecessary abstraction",
        ),
    ),
    ScoringRule(
        "long_parameter_list",
        lambda s: when(s.profile.long_param_list_count > 2, 0.05, "long parameter list"),
    ),
    ScoringRule(
        "magic_numbers",
        lambda s: when(s.profile.magic_number_count > 5, 0.05, "magic numbers"),
    ),
    ScoringRule(
        "missing_error_handling",
        lambda s: when(
            s.profile.uses_async and not s.profile.has_error_handling,
            0.10,
            "missing error handling",
        ),
    ),
    ScoringRule(
        "structural_uniformity",
        lambda s: (
            tiered(
                s.sus,
                (
                    Tier(0.50, 0.15, "structurally uniform functions"),
                    Tier(0.25, 0.08, "similar function structure"),
                ),
            )
            if s.sus_bodies >= MIN_FUNCTIONS_FOR_SUS
            else None
        ),
    ),
    ScoringRule(
        "token_concentration",
        lambda s: when(
            s.token_total >= MIN_TOKENS_FOR_TDD and s.tdd > 0.55,
            0.08,
            "low token diversity",
        ),
    ),
    ScoringRule(
        "comment_redundancy",
        lambda s: (
            tiered(
                s.crs,
                (Tier(0.50, 0.10, "redundant comments"), Tier(0.25, 0.05, "restating comments")),
            )
            if len(s.profile.comment_lines) >= 3
            else None
        ),
    ),
    ScoringRule(
        "style_uniformity",
        lambda s: when(
            s.profile.loc > MIN_LINES_FOR_SCS and s.scs > 0.70, 0.05, "uniform line style"
        ),
    ),
    ScoringRule("cross_file", _cross_file),
)


# ── Entry point ───────────────────────────────────────────────────


def ai_debt_contribution(likelihood: float) -> int:
    """Two-piece linear map of likelihood onto [0, 100], rounded half up."""
    if likelihood < 0.4:
        raw = 8 + 35 * likelihood
    else:
        raw = 45 + 55 * likelihood
    return int(clamp(math.floor(raw + 0.5), 0, 100))


def detect_ai_patterns(
    text: str,
    others: Sequence[str] = (),
    profile: Optional[TextProfile] = None,
) -> PatternResult:
    """Score one file's text for AI-authorship signals.

    Args:
        text: File contents
        others: Texts of every other file in the corpus (cross-file matching
            runs only when non-empty)
        profile: Pre-computed profile of text, if the caller has one

    Returns:
        PatternResult with likelihood, tags, contribution and sub-scores
    """
    profile = profile or TextProfile.from_text(text)

    sus, sus_bodies = structural_uniformity(profile)
    tdd, token_total = token_distribution_divergence(profile)
    signals = PatternSignals(
        profile=profile,
        sus=sus,
        sus_bodies=sus_bodies,
        tdd=tdd,
        token_total=token_total,
        pri=pattern_repetition_index(profile),
        crs=comment_redundancy(profile),
        scs=style_consistency(profile),
        generic_density=generic_identifier_density(profile),
        line_uniformity=line_length_uniformity(profile),
        cross_file_share=cross_file_share(text, others),
    )

    fold = fold_rules(PATTERN_RULES, signals)

    weighted_ai = (
        WEIGHTED_AI_WEIGHTS["sus"] * signals.sus
        + WEIGHTED_AI_WEIGHTS["pri"] * signals.pri
        + WEIGHTED_AI_WEIGHTS["crs"] * signals.crs
        + WEIGHTED_AI_WEIGHTS["generic_density"] * signals.generic_density
        + WEIGHTED_AI_WEIGHTS["line_uniformity"] * signals.line_uniformity
    )
    likelihood = clamp(max(fold.score + BASE_LIKELIHOOD, weighted_ai))

    return PatternResult(
        ai_likelihood=likelihood,
        issues=list(fold.tags),
        ai_debt_contribution=ai_debt_contribution(likelihood),
        sus=signals.sus,
        tdd=signals.tdd,
        pri=signals.pri,
        crs=signals.crs,
        scs=signals.scs,
        weighted_ai=weighted_ai,
        rule_score=fold.score,
    )
