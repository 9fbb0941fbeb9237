"""Numeric helpers shared by the estimators and the timeline."""

from .entropy import Entropy
from .statistics import Statistics, clamp

__all__ = ["Entropy", "Statistics", "clamp"]
