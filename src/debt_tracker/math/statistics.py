"""Descriptive statistics over line lengths, token counts and score series."""

import statistics as stdlib_stats
from collections.abc import Sequence

import numpy as np


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]."""
    if value < low:
        return low
    if value > high:
        return high
    return value


class Statistics:
    """Statistical helpers used by the heuristic estimators."""

    @staticmethod
    def mean(values: Sequence[float]) -> float:
        """Compute arithmetic mean (0.0 for an empty sequence)."""
        if not values:
            return 0.0
        return stdlib_stats.fmean(values)

    @staticmethod
    def pstdev(values: Sequence[float]) -> float:
        """Population standard deviation (0.0 for fewer than two values)."""
        if len(values) < 2:
            return 0.0
        return float(np.std(np.asarray(values, dtype=float)))

    @staticmethod
    def coefficient_of_variation(values: Sequence[float]) -> float:
        """sigma / mu, 0.0 when the mean is zero."""
        mean_val = Statistics.mean(values)
        if mean_val == 0:
            return 0.0
        return Statistics.pstdev(values) / mean_val

    @staticmethod
    def top_k_share(counts: Sequence[int], k: int) -> float:
        """Share of the total held by the k largest counts."""
        total = sum(counts)
        if total == 0:
            return 0.0
        top = np.sort(np.asarray(counts, dtype=float))[::-1][:k]
        return float(top.sum() / total)
