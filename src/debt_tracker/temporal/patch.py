"""Heuristic debt deltas for a single unified-diff patch."""

from __future__ import annotations

import re
from collections import Counter

from ..math import clamp
from .models import PatchScore

_BRANCH_RE = re.compile(r"\b(?:if|else|for|while|switch|catch)\b|&&|\|\|")
_GENERIC_RE = re.compile(
    r"\b(?:temp|data|result|value|item|obj|val|ret|tmp|output|input|foo|bar)\b"
)
_COMMENT_RE = re.compile(r"^\+\s*(?://|#|\*)")
_MAGIC_RE = re.compile(r"(?<![.\w])\d{2,}(?![.\w])")
_ASYNC_RE = re.compile(r"\basync\b|\bawait\b")
_TRY_RE = re.compile(r"\btry\b")
_CATCH_RE = re.compile(r"\b(?:catch|except)\b")

DUPLICATE_MIN_CHARS = 20
DUPLICATE_MIN_COUNT = 3


def split_patch(patch: str) -> tuple[list[str], list[str]]:
    """Added and removed lines of a patch, excluding the +++/--- file headers."""
    added: list[str] = []
    removed: list[str] = []
    for line in patch.split("\n"):
        if line.startswith("+") and not line.startswith("+++"):
            added.append(line)
        elif line.startswith("-") and not line.startswith("---"):
            removed.append(line)
    return added, removed


def score_patch(patch: str) -> PatchScore:
    """Score the lines a patch adds and removes.

    Each delta is clamped to [0, 1].
    """
    added_lines, removed_lines = split_patch(patch)
    added = "\n".join(added_lines)
    removed = "\n".join(removed_lines)

    tech = 0.0
    cog = 0.0
    ai = 0.0

    # nesting growth
    if added.count("{") > removed.count("{") + 3:
        tech += 0.15

    # complexity growth
    branch_growth = len(_BRANCH_RE.findall(added)) - len(_BRANCH_RE.findall(removed))
    tech += max(0, branch_growth) * 0.02

    # size growth (tiers are cumulative)
    net_lines = len(added_lines) - len(removed_lines)
    if net_lines > 50:
        tech += 0.10
    if net_lines > 100:
        tech += 0.15

    # literal duplication
    trimmed = [line[1:].strip() for line in added_lines]
    freq = Counter(line for line in trimmed if len(line) > DUPLICATE_MIN_CHARS)
    if any(count >= DUPLICATE_MIN_COUNT for count in freq.values()):
        tech += 0.10
        ai += 0.12

    # generic naming
    if len(_GENERIC_RE.findall(added)) > 5:
        cog += 0.10
        ai += 0.08

    # over-explained comments
    comments = sum(1 for line in added_lines if _COMMENT_RE.match(line))
    if comments > len(added_lines) * 0.3:
        cog += 0.10
        ai += 0.10

    # magic numbers
    if len(_MAGIC_RE.findall(added)) > 3:
        tech += 0.05

    # async without error handling
    if _ASYNC_RE.search(added) and not (_TRY_RE.search(added) and _CATCH_RE.search(added)):
        tech += 0.08

    return PatchScore(tech_delta=clamp(tech), cog_delta=clamp(cog), ai_delta=clamp(ai))
