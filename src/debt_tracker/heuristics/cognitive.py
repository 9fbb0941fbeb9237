"""Cognitive Debt Estimator: readability and comprehension burden.

Consumes the already computed technical debt and AI likelihood for the
derived propagation scores (DPS, DLI, DRF) and rescans the text for the
comprehension sub-scores. cognitive_debt is a fixed weighted sum:

    CCD .13 | 1-ES .12 | AES .10 | RDI .10 | CLI .12 | IAS .11 | AGS .10 | RI .12 | CSC .10
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..math import Statistics, clamp
from .models import CognitiveResult
from .rules import ScoringRule, fold_rules, when
from .text import GENERIC_NAME_RE, TextProfile, count_branches

COGNITIVE_WEIGHTS = {
    "ccd": 0.13,
    "inv_es": 0.12,
    "aes": 0.10,
    "rdi": 0.10,
    "cli": 0.12,
    "ias": 0.11,
    "ags": 0.10,
    "ri": 0.12,
    "csc": 0.10,
}

# Short names that are keywords or idioms rather than ambiguous identifiers.
SHORT_KEYWORDS = frozenset(
    {"if", "in", "is", "or", "do", "fn", "as", "of", "go", "to", "on", "at", "by", "up", "id", "ok"}
)


@dataclass(frozen=True)
class CognitiveSignals:
    ccd: float
    es: float
    aes: float
    rdi: float
    cli: float
    ias: float
    ags: float
    ri: float
    csc: float
    has_identifiers: bool


def control_flow_density(profile: TextProfile) -> float:
    """CCD: control-flow keywords against 15% of the line count."""
    return clamp(profile.control_flow_count / (profile.total_lines * 0.15 + 1))


def explainability(profile: TextProfile) -> float:
    """ES: mean identifier length over 12 (identifiers of 3+ characters)."""
    identifiers = profile.long_identifiers
    if not identifiers:
        return 0.0
    return clamp(Statistics.mean([len(i) for i in identifiers]) / 12)


def line_entropy(profile: TextProfile) -> float:
    """AES: standard deviation of line length over 40."""
    return clamp(Statistics.pstdev(profile.line_lengths) / 40)


def readability_degradation(profile: TextProfile) -> float:
    """RDI: three-level step on the comment ratio."""
    ratio = profile.comment_ratio
    if ratio > 0.30:
        return 0.8
    if ratio < 0.05:
        return 0.55
    return 0.3


def mean_function_length(profile: TextProfile) -> float:
    return profile.loc / max(profile.function_count, 1)


def cognitive_load_index(profile: TextProfile) -> float:
    """CLI: nesting, branch density and mean function length."""
    branch_density = profile.branch_count / max(profile.loc, 1)
    return clamp(
        0.40 * min(profile.max_brace_depth / 6, 1.0)
        + 0.35 * min(branch_density / 0.2, 1.0)
        + 0.25 * min(mean_function_length(profile) / 60, 1.0)
    )


def identifier_ambiguity(profile: TextProfile) -> float:
    """IAS: density of very short and generic identifiers, 25% saturates."""
    identifiers = profile.identifiers
    if not identifiers:
        return 0.0
    ambiguous = sum(
        1
        for name in identifiers
        if (len(name) <= 2 and name.lower() not in SHORT_KEYWORDS)
        or GENERIC_NAME_RE.fullmatch(name)
    )
    return clamp(ambiguous / len(identifiers) * 4)


def abstraction_gap(profile: TextProfile) -> float:
    """AGS: distance between naming effort and per-function branching.

    Long descriptive names over trivial bodies, or terse names over dense
    logic, both widen the gap.
    """
    functions = profile.functions
    if not functions:
        return 0.0
    name_score = min(Statistics.mean([len(fn.name) for fn in functions]) / 20, 1.0)
    complexity_score = min(
        Statistics.mean([count_branches(fn.body) for fn in functions]) / 10, 1.0
    )
    return clamp(abs(name_score - complexity_score))


def readability_index(profile: TextProfile, es: float) -> float:
    """RI: mean line length, max nesting and lack of explainability."""
    mean_line = Statistics.mean(profile.code_line_lengths)
    return clamp(
        0.4 * min(mean_line / 100, 1.0)
        + 0.3 * min(profile.max_brace_depth / 8, 1.0)
        + 0.3 * (1.0 - es)
    )


def context_switching_cost(profile: TextProfile) -> float:
    """CSC: import count plus call-site density."""
    call_density = profile.call_site_count / max(profile.loc, 1)
    return clamp(
        0.5 * min(profile.import_count / 15, 1.0) + 0.5 * min(call_density / 1.5, 1.0)
    )


COGNITIVE_RULES: tuple[ScoringRule[CognitiveSignals], ...] = (
    ScoringRule("ccd", lambda s: when(s.ccd > 0.6, 0.0, "high control-flow density")),
    ScoringRule(
        "es",
        lambda s: when(s.has_identifiers and s.es < 0.35, 0.0, "low explainability"),
    ),
    ScoringRule("aes", lambda s: when(s.aes > 0.75, 0.0, "erratic line structure")),
    ScoringRule("rdi", lambda s: when(s.rdi >= 0.8, 0.0, "readability degradation")),
    ScoringRule("cli", lambda s: when(s.cli > 0.6, 0.0, "high cognitive load index")),
    ScoringRule("ias", lambda s: when(s.ias > 0.5, 0.0, "high identifier ambiguity")),
    ScoringRule("ags", lambda s: when(s.ags > 0.5, 0.0, "abstraction gap")),
    ScoringRule("ri", lambda s: when(s.ri > 0.6, 0.0, "poor readability")),
    ScoringRule("csc", lambda s: when(s.csc > 0.6, 0.0, "high context switching cost")),
)


def estimate_cognitive_debt(
    text: str,
    technical_debt: float,
    ai_likelihood: float,
    profile: Optional[TextProfile] = None,
) -> CognitiveResult:
    """Score one file's comprehension burden.

    Args:
        text: File contents
        technical_debt: Technical Debt Estimator score for the same text
        ai_likelihood: Pattern Detector likelihood for the same text
        profile: Pre-computed profile of text, if the caller has one

    Returns:
        CognitiveResult; cognitive_debt is clamped to [0, 1]
    """
    profile = profile or TextProfile.from_text(text)

    es = explainability(profile)
    signals = CognitiveSignals(
        ccd=control_flow_density(profile),
        es=es,
        aes=line_entropy(profile),
        rdi=readability_degradation(profile),
        cli=cognitive_load_index(profile),
        ias=identifier_ambiguity(profile),
        ags=abstraction_gap(profile),
        ri=readability_index(profile, es),
        csc=context_switching_cost(profile),
        has_identifiers=bool(profile.long_identifiers),
    )

    w = COGNITIVE_WEIGHTS
    cognitive_debt = clamp(
        w["ccd"] * signals.ccd
        + w["inv_es"] * (1.0 - signals.es)
        + w["aes"] * signals.aes
        + w["rdi"] * signals.rdi
        + w["cli"] * signals.cli
        + w["ias"] * signals.ias
        + w["ags"] * signals.ags
        + w["ri"] * signals.ri
        + w["csc"] * signals.csc
    )

    technical_debt = clamp(technical_debt)
    ai_likelihood = clamp(ai_likelihood)

    return CognitiveResult(
        cognitive_debt=cognitive_debt,
        ccd=signals.ccd,
        es=signals.es,
        aes=signals.aes,
        rdi=signals.rdi,
        cli=signals.cli,
        ias=signals.ias,
        ags=signals.ags,
        ri=signals.ri,
        csc=signals.csc,
        dps=clamp(0.6 * technical_debt + 0.4 * ai_likelihood),
        dli=clamp(0.5 * technical_debt + 0.5 * signals.ccd),
        drf=clamp(0.4 * signals.aes + 0.3 * technical_debt + 0.3 * ai_likelihood),
        issues=list(fold_rules(COGNITIVE_RULES, signals).tags),
    )
