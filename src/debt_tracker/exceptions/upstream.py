"""Upstream service exceptions: GitHub API and the LLM gateway."""

from typing import Dict, Optional

from .base import DebtTrackerError


class UpstreamUnavailableError(DebtTrackerError):
    """Raised when a top-level fetch returns a non-success status."""

    def __init__(self, service: str, reason: str, status_code: Optional[int] = None):
        details: Dict[str, str] = {"service": service}
        if status_code is not None:
            details["status"] = str(status_code)
        super().__init__(f"{service} unavailable: {reason}", details=details)
        self.service = service
        self.reason = reason
        self.status_code = status_code


class SecondaryServiceDegradedError(DebtTrackerError):
    """Raised when the LLM second opinion is temporarily unusable.

    Callers should retry later rather than treat this as a hard failure.
    """

    status_code: int = 503

    def __init__(self, message: str):
        super().__init__(message, details={"status": str(self.status_code)})


class RateLimitedError(SecondaryServiceDegradedError):
    """The LLM gateway answered 429."""

    status_code = 429

    def __init__(self, message: str = "Rate limited, try again later"):
        super().__init__(message)


class QuotaExhaustedError(SecondaryServiceDegradedError):
    """The LLM gateway answered 402."""

    status_code = 402

    def __init__(self, message: str = "Credits exhausted"):
        super().__init__(message)
