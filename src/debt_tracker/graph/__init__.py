"""Debt propagation graph: import and shared-issue edges between files."""

from .builder import (
    build_propagation_graph,
    extract_import_references,
    import_edges,
    pattern_edges,
    resolve_reference,
)
from .models import EdgeKind, PropagationEdge

__all__ = [
    "build_propagation_graph",
    "extract_import_references",
    "import_edges",
    "pattern_edges",
    "resolve_reference",
    "EdgeKind",
    "PropagationEdge",
]
