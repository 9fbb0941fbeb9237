"""JSON formatter for debt-tracker.

Scores are kept at full precision internally and rounded to two decimals
here, at the output boundary.
"""

import json
from dataclasses import asdict
from typing import Any

from ..analysis.models import HistoryResult, Recommendation, SnapshotResult
from ..graph.models import PropagationEdge
from ..heuristics.models import FileAnalysis
from ..llm.models import AIVerdict
from ..storage.history import RollupRecord
from .base import BaseFormatter

PRECISION = 2


def _round_floats(value: Any) -> Any:
    if isinstance(value, float):
        return round(value, PRECISION)
    if isinstance(value, dict):
        return {k: _round_floats(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_round_floats(v) for v in value]
    return value


def file_to_dict(analysis: FileAnalysis) -> dict[str, Any]:
    return _round_floats(asdict(analysis))


def edge_to_dict(edge: PropagationEdge) -> dict[str, Any]:
    return {
        "source": edge.source,
        "target": edge.target,
        "weight": round(edge.weight, PRECISION),
        "kind": edge.kind.value,
    }


def recommendation_to_dict(rec: Recommendation) -> dict[str, Any]:
    data = _round_floats(asdict(rec))
    data["impact_percent"] = rec.impact_percent
    return data


def snapshot_to_dict(result: SnapshotResult) -> dict[str, Any]:
    return {
        "repo_name": result.repo_name,
        "total_files": result.total_files,
        "stars": result.stars,
        "language": result.language,
        "files": [file_to_dict(f) for f in result.files],
        "propagation": [edge_to_dict(e) for e in result.propagation],
        "summary": _round_floats(asdict(result.summary)),
        "recommendations": [recommendation_to_dict(r) for r in result.recommendations],
    }


def history_to_dict(result: HistoryResult) -> dict[str, Any]:
    return {
        "repo_name": result.repo_name,
        "commits": [_round_floats(asdict(c)) for c in result.commits],
        "developers": [_round_floats(asdict(d)) for d in result.developers],
        "summary": _round_floats(asdict(result.summary)),
    }


def rollup_to_dict(record: RollupRecord) -> dict[str, Any]:
    return _round_floats(asdict(record))


def verdict_to_dict(verdict: AIVerdict) -> dict[str, Any]:
    return _round_floats(verdict.model_dump(by_alias=False))


class JsonFormatter(BaseFormatter):
    """Render results as indented JSON."""

    def format_snapshot(self, result: SnapshotResult) -> str:
        return json.dumps(snapshot_to_dict(result), indent=2)

    def format_history(self, result: HistoryResult) -> str:
        return json.dumps(history_to_dict(result), indent=2)
