"""Assemble the three estimators into one FileAnalysis."""

from __future__ import annotations

from collections.abc import Sequence

from .cognitive import estimate_cognitive_debt
from .models import FileAnalysis, FileMetrics, FileRecord
from .patterns import detect_ai_patterns
from .rules import merge_tags
from .technical import estimate_technical_debt
from .text import TextProfile


def analyze_file(record: FileRecord, others: Sequence[str] = ()) -> FileAnalysis:
    """Run Pattern, Technical and Cognitive estimators over one file.

    Args:
        record: The file to score
        others: Texts of every other file in the corpus

    Returns:
        FileAnalysis with propagation_score == metrics.dps
    """
    profile = TextProfile.from_text(record.text)

    pattern = detect_ai_patterns(record.text, others, profile=profile)
    technical = estimate_technical_debt(record.text, profile=profile)
    cognitive = estimate_cognitive_debt(
        record.text, technical.technical_debt, pattern.ai_likelihood, profile=profile
    )

    metrics = FileMetrics(
        sus=pattern.sus,
        tdd=pattern.tdd,
        pri=pattern.pri,
        crs=pattern.crs,
        scs=pattern.scs,
        ddp=technical.ddp,
        mds=technical.mds,
        ccd=cognitive.ccd,
        es=cognitive.es,
        aes=cognitive.aes,
        rdi=cognitive.rdi,
        cli=cognitive.cli,
        ias=cognitive.ias,
        ags=cognitive.ags,
        ri=cognitive.ri,
        csc=cognitive.csc,
        dps=cognitive.dps,
        dli=cognitive.dli,
        drf=cognitive.drf,
    )

    return FileAnalysis(
        path=record.path,
        ai_likelihood=pattern.ai_likelihood,
        technical_debt=technical.technical_debt,
        cognitive_debt=cognitive.cognitive_debt,
        propagation_score=metrics.dps,
        issues=merge_tags(pattern.issues, technical.issues, cognitive.issues),
        metrics=metrics,
        lines_of_code=technical.lines_of_code,
        function_count=technical.function_count,
        cyclomatic_complexity=technical.cyclomatic_complexity,
        nesting_depth=technical.nesting_depth,
        ai_debt_contribution=pattern.ai_debt_contribution,
    )
