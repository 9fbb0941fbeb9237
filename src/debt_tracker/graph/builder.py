"""Propagation graph construction from import references and shared issues."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from pathlib import PurePosixPath
from typing import Optional

from ..heuristics.models import FileAnalysis
from ..logging_config import get_logger
from ..math import clamp
from .models import EdgeKind, PropagationEdge

logger = get_logger(__name__)

DEFAULT_MAX_EDGES = 35
MIN_SHARED_ISSUES = 2
SHARED_ISSUE_SCALE = 5

# Quoted module references: import 'x', import y from 'x', export * from 'x',
# require('x'), import('x'), #include "x".
_IMPORT_REF_RES = (
    re.compile(r"""\b(?:import|require)\s*\(?\s*['"]([^'"]+)['"]"""),
    re.compile(r"""\bfrom\s+['"]([^'"]+)['"]"""),
    re.compile(r"""#\s*include\s+"([^"]+)\""""),
)

_INDEX_STEMS = frozenset({"index", "__init__", "mod", "main"})


def extract_import_references(text: str) -> list[str]:
    """Quoted module references in source order, de-duplicated."""
    found: list[tuple[int, str]] = []
    for pattern in _IMPORT_REF_RES:
        for m in pattern.finditer(text):
            found.append((m.start(1), m.group(1)))
    found.sort()

    refs: list[str] = []
    for _, ref in found:
        if ref not in refs:
            refs.append(ref)
    return refs


def _final_segment(reference: str) -> str:
    stripped = reference.rstrip("/").lstrip("./")
    return stripped.split("/")[-1] if stripped else ""


def resolve_reference(
    reference: str, source: str, candidates: Sequence[str]
) -> Optional[str]:
    """Match a reference's final path segment against candidate paths.

    A candidate matches when its file name, its stem, or (for index-style
    files) its parent directory name equals the segment, or the segment's
    own stem. First match in candidate order wins; the source file itself
    is never a match.
    """
    segment = _final_segment(reference)
    if not segment:
        return None
    segment_stem = PurePosixPath(segment).stem if "." in segment else segment

    for path in candidates:
        if path == source:
            continue
        p = PurePosixPath(path)
        if p.name == segment or p.stem in (segment, segment_stem):
            return path
        if p.stem in _INDEX_STEMS and p.parent.name in (segment, segment_stem):
            return path
    return None


def import_edges(
    files: Sequence[FileAnalysis], contents: Mapping[str, str]
) -> list[PropagationEdge]:
    """Directed edges from each file to the files its references resolve to.

    Weight is the mean of the source file's technical debt and AI likelihood.
    """
    paths = [f.path for f in files]
    edges: list[PropagationEdge] = []
    seen: set[tuple[str, str]] = set()

    for f in files:
        text = contents.get(f.path, "")
        weight = clamp((f.technical_debt + f.ai_likelihood) / 2)
        for ref in extract_import_references(text):
            target = resolve_reference(ref, f.path, paths)
            if target is None or (f.path, target) in seen:
                continue
            seen.add((f.path, target))
            edges.append(PropagationEdge(f.path, target, weight, EdgeKind.IMPORT))

    return edges


def pattern_edges(files: Sequence[FileAnalysis]) -> list[PropagationEdge]:
    """One edge per unordered pair sharing at least two issue tags."""
    edges: list[PropagationEdge] = []
    tag_sets = [set(f.issues) for f in files]

    for i in range(len(files)):
        for j in range(i + 1, len(files)):
            shared = len(tag_sets[i] & tag_sets[j])
            if shared >= MIN_SHARED_ISSUES:
                edges.append(
                    PropagationEdge(
                        files[i].path,
                        files[j].path,
                        clamp(shared / SHARED_ISSUE_SCALE),
                        EdgeKind.PATTERN,
                    )
                )

    return edges


def build_propagation_graph(
    files: Sequence[FileAnalysis],
    contents: Mapping[str, str],
    max_edges: int = DEFAULT_MAX_EDGES,
) -> list[PropagationEdge]:
    """Build the capped propagation edge list for a snapshot.

    Import edges come first, then pattern edges; the cap slices in that
    insertion order rather than ranking by weight.
    """
    imports = import_edges(files, contents)
    patterns = pattern_edges(files)
    edges = imports + patterns

    if len(edges) > max_edges:
        logger.debug(
            "Propagation graph truncated: %d candidate edges, keeping %d",
            len(edges),
            max_edges,
        )
    return edges[:max_edges]
