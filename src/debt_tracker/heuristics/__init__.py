"""Per-file heuristic estimators.

Pattern Detector and Technical Debt Estimator are independent; the
Cognitive Debt Estimator consumes both of their headline scores.
"""

from .cognitive import estimate_cognitive_debt
from .file_analysis import analyze_file
from .models import (
    CognitiveResult,
    FileAnalysis,
    FileMetrics,
    FileRecord,
    PatternResult,
    TechnicalResult,
)
from .patterns import ai_debt_contribution, detect_ai_patterns
from .technical import estimate_technical_debt
from .text import TextProfile

__all__ = [
    "analyze_file",
    "detect_ai_patterns",
    "estimate_technical_debt",
    "estimate_cognitive_debt",
    "ai_debt_contribution",
    "TextProfile",
    "FileRecord",
    "FileMetrics",
    "FileAnalysis",
    "PatternResult",
    "TechnicalResult",
    "CognitiveResult",
]
