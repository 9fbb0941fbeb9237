"""Data models for per-file heuristic analysis.

Score ranges:
  Headline scores (ai_likelihood, technical_debt, cognitive_debt,
  propagation_score) and every FileMetrics field lie in [0, 1].
  ai_debt_contribution lies in [0, 100].
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FileRecord:
    """One fetched source file. The text is consumed by analysis, never returned."""

    path: str
    text: str

    @property
    def line_count(self) -> int:
        return self.text.count("\n") + 1


@dataclass(frozen=True)
class FileMetrics:
    """Named bounded sub-scores for one file."""

    # Pattern Detector
    sus: float = 0.0  # structural uniformity
    tdd: float = 0.0  # token distribution divergence
    pri: float = 0.0  # pattern repetition index
    crs: float = 0.0  # comment redundancy score
    scs: float = 0.0  # style consistency score

    # Technical Debt Estimator
    ddp: float = 0.0  # defect density proxy
    mds: float = 0.0  # modularity degradation score

    # Cognitive Debt Estimator
    ccd: float = 0.0  # control-flow density
    es: float = 0.0  # explainability (higher = clearer)
    aes: float = 0.0  # line-length entropy
    rdi: float = 0.0  # readability degradation index
    cli: float = 0.0  # cognitive load index
    ias: float = 0.0  # identifier ambiguity
    ags: float = 0.0  # abstraction gap
    ri: float = 0.0  # readability index (higher = harder)
    csc: float = 0.0  # context switching cost

    # Derived propagation scores
    dps: float = 0.0  # debt propagation score
    dli: float = 0.0  # debt longevity index
    drf: float = 0.0  # dependency risk factor


@dataclass(frozen=True)
class PatternResult:
    """Pattern Detector output."""

    ai_likelihood: float
    issues: list[str]
    ai_debt_contribution: int
    sus: float
    tdd: float
    pri: float
    crs: float
    scs: float
    weighted_ai: float = 0.0
    rule_score: float = 0.0


@dataclass(frozen=True)
class TechnicalResult:
    """Technical Debt Estimator output."""

    technical_debt: float
    cyclomatic_complexity: int
    nesting_depth: int
    lines_of_code: int
    function_count: int
    ddp: float
    mds: float
    issues: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CognitiveResult:
    """Cognitive Debt Estimator output."""

    cognitive_debt: float
    ccd: float
    es: float
    aes: float
    rdi: float
    cli: float
    ias: float
    ags: float
    ri: float
    csc: float
    dps: float
    dli: float
    drf: float
    issues: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FileAnalysis:
    """Complete per-file result.

    propagation_score always equals metrics.dps.
    """

    path: str
    ai_likelihood: float
    technical_debt: float
    cognitive_debt: float
    propagation_score: float
    issues: list[str]
    metrics: FileMetrics
    lines_of_code: int
    function_count: int
    cyclomatic_complexity: int
    nesting_depth: int
    ai_debt_contribution: int

    @property
    def combined_debt(self) -> float:
        """Technical plus cognitive debt, used to rank refactor targets."""
        return self.technical_debt + self.cognitive_debt

    @property
    def is_high_risk(self) -> bool:
        return self.ai_likelihood > 0.5 and self.technical_debt > 0.4
