"""Additive scoring rules.

Every heuristic is a ScoringRule: a name and a pure check that returns
either None (threshold not crossed) or a (weight, tag) pair. A rule's
result is folded into a running score; tiered rules return the first tier
whose threshold is exceeded, so a strong and a weak tier never fire
together. A tier may carry no tag, in which case only its weight counts.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

RuleHit = tuple[float, Optional[str]]


@dataclass(frozen=True)
class ScoringRule(Generic[T]):
    name: str
    check: Callable[[T], Optional[RuleHit]]

    def apply(self, subject: T) -> Optional[RuleHit]:
        return self.check(subject)


@dataclass(frozen=True)
class Tier:
    """Fires when the measured value is strictly greater than threshold."""

    threshold: float
    weight: float
    tag: Optional[str] = None


@dataclass(frozen=True)
class RuleFold:
    score: float
    tags: tuple[str, ...]
    fired: tuple[str, ...]


def tiered(value: float, tiers: Sequence[Tier]) -> Optional[RuleHit]:
    """Return the first tier (strongest first) whose threshold value exceeds."""
    for tier in tiers:
        if value > tier.threshold:
            return tier.weight, tier.tag
    return None


def when(condition: bool, weight: float, tag: Optional[str]) -> Optional[RuleHit]:
    return (weight, tag) if condition else None


def fold_rules(rules: Iterable[ScoringRule[T]], subject: T) -> RuleFold:
    """Apply every rule to subject and sum the hits.

    Tags are de-duplicated in first-seen order.
    """
    score = 0.0
    tags: list[str] = []
    fired: list[str] = []
    for rule in rules:
        hit = rule.apply(subject)
        if hit is None:
            continue
        weight, tag = hit
        score += weight
        fired.append(rule.name)
        if tag is not None and tag not in tags:
            tags.append(tag)
    return RuleFold(score=score, tags=tuple(tags), fired=tuple(fired))


def merge_tags(*groups: Iterable[str]) -> list[str]:
    """Union of tag groups, de-duplicated, first-seen order."""
    merged: list[str] = []
    seen: set[str] = set()
    for group in groups:
        for tag in group:
            if tag not in seen:
                seen.add(tag)
                merged.append(tag)
    return merged
