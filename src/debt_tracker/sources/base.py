"""Base class for repository sources."""

from abc import ABC, abstractmethod
from typing import Optional

from ..temporal.models import CommitDiff
from .models import RemoteFile, RepoInfo, RepoRef


class SourceFetcher(ABC):
    """Abstract repository source: file snapshot plus commit history.

    Implementations raise UpstreamUnavailableError for top-level failures
    and absorb (log and skip) failures of individual files or commits.
    """

    @abstractmethod
    def get_repository(self, ref: RepoRef) -> RepoInfo:
        """Repository metadata."""

    @abstractmethod
    def list_code_files(self, ref: RepoRef) -> list[RemoteFile]:
        """Source files eligible for analysis, capped."""

    @abstractmethod
    def fetch_file_text(self, remote: RemoteFile) -> Optional[str]:
        """File contents, or None when it cannot be used."""

    @abstractmethod
    def history(self, ref: RepoRef, count: int) -> list[CommitDiff]:
        """Recent commits with patches, oldest first."""

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
