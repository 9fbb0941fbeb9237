"""Timeline summary: spikes, developer impact, trend, momentum, prediction."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import replace

from ..math import clamp
from .models import CommitRecord, DeveloperImpact, Prediction, TimelineSummary

SPIKE_THRESHOLD = 0.08
INCREASING_SLOPE = 0.15
IMPROVING_SLOPE = -0.10
UNSTABLE_SPIKES = 3
MOMENTUM_WINDOW = 5
FAST_MOMENTUM = 0.05

# Deltas are compared after rounding so float noise at the threshold
# (0.18 - 0.10 = 0.07999...) cannot flip a spike either way.
_DELTA_PRECISION = 9


def _jump(current: float, previous: float) -> float:
    return round(current - previous, _DELTA_PRECISION)


def mark_spikes(
    records: Sequence[CommitRecord], threshold: float = SPIKE_THRESHOLD
) -> list[CommitRecord]:
    """Flag records whose tech or cog score jumped strictly above threshold."""
    marked: list[CommitRecord] = []
    for i, record in enumerate(records):
        is_spike = False
        if i > 0:
            prev = records[i - 1]
            is_spike = (
                _jump(record.tech_debt, prev.tech_debt) > threshold
                or _jump(record.cog_debt, prev.cog_debt) > threshold
            )
        marked.append(replace(record, is_spike=is_spike))
    return marked


def developer_impact(records: Sequence[CommitRecord]) -> list[DeveloperImpact]:
    """Per-author sum of consecutive score deltas, highest total first.

    The seed commit (index 0) has no delta and is not attributed.
    """
    tech: dict[str, float] = defaultdict(float)
    cog: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)

    for prev, record in zip(records, records[1:]):
        tech[record.author] += record.tech_debt - prev.tech_debt
        cog[record.author] += record.cog_debt - prev.cog_debt
        counts[record.author] += 1

    impacts = [
        DeveloperImpact(
            name=name,
            tech_impact=tech[name],
            cog_impact=cog[name],
            total_impact=tech[name] + cog[name],
            commit_count=counts[name],
        )
        for name in counts
    ]
    impacts.sort(key=lambda d: d.total_impact, reverse=True)
    return impacts


def classify_trend(avg_slope: float, spike_count: int) -> str:
    """Priority order: increasing, improving, unstable, fluctuating."""
    if avg_slope > INCREASING_SLOPE:
        return "increasing"
    if avg_slope < IMPROVING_SLOPE:
        return "improving"
    if spike_count > UNSTABLE_SPIKES:
        return "unstable"
    return "fluctuating"


def classify_momentum(records: Sequence[CommitRecord]) -> str:
    """Tech-debt slope over the last five records (or fewer)."""
    window = records[-MOMENTUM_WINDOW:]
    if len(window) > 1:
        recent_slope = (window[-1].tech_debt - window[0].tech_debt) / len(window)
    else:
        recent_slope = 0.0
    if recent_slope > FAST_MOMENTUM:
        return "fast"
    if recent_slope > 0:
        return "slow"
    return "stable"


def predict(records: Sequence[CommitRecord]) -> Prediction:
    """Extrapolate the first-to-last slope half and full length ahead."""
    if not records:
        return Prediction(0.0, 0.0, 0.0, 0.0)
    first, last = records[0], records[-1]
    tech_slope = last.tech_debt - first.tech_debt
    cog_slope = last.cog_debt - first.cog_debt
    return Prediction(
        tech_debt_5=clamp(last.tech_debt + tech_slope * 0.5),
        tech_debt_10=clamp(last.tech_debt + tech_slope),
        cog_debt_5=clamp(last.cog_debt + cog_slope * 0.5),
        cog_debt_10=clamp(last.cog_debt + cog_slope),
    )


def summarize(records: Sequence[CommitRecord]) -> TimelineSummary:
    """Trend, momentum, spike count and prediction for spike-marked records."""
    spike_count = sum(1 for r in records if r.is_spike)
    if records:
        first, last = records[0], records[-1]
        avg_slope = (
            (last.tech_debt - first.tech_debt) + (last.cog_debt - first.cog_debt)
        ) / 2
    else:
        avg_slope = 0.0
    return TimelineSummary(
        trend=classify_trend(avg_slope, spike_count),
        momentum=classify_momentum(records),
        spike_count=spike_count,
        prediction=predict(records),
    )
