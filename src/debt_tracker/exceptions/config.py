"""Configuration and input exceptions: settings, repository identifiers."""

from .base import DebtTrackerError


class ConfigurationError(DebtTrackerError):
    """Base class for configuration-related errors."""

    pass


class InvalidRepositoryError(ConfigurationError):
    """Raised when a repository identifier cannot be parsed."""

    def __init__(self, identifier: str):
        super().__init__("Invalid repository URL", details={"identifier": identifier})
        self.identifier = identifier
