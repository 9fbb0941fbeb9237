"""Exception hierarchy for debt-tracker."""

from .analysis import AnalysisError, EmptyResultError
from .base import DebtTrackerError
from .config import ConfigurationError, InvalidRepositoryError
from .upstream import (
    QuotaExhaustedError,
    RateLimitedError,
    SecondaryServiceDegradedError,
    UpstreamUnavailableError,
)

__all__ = [
    "DebtTrackerError",
    "AnalysisError",
    "EmptyResultError",
    "ConfigurationError",
    "InvalidRepositoryError",
    "UpstreamUnavailableError",
    "SecondaryServiceDegradedError",
    "RateLimitedError",
    "QuotaExhaustedError",
]
