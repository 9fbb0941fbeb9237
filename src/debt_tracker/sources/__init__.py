"""Repository sources: GitHub REST fetcher for snapshots and commit history."""

from .base import SourceFetcher
from .github import GitHubClient, parse_repository
from .models import RemoteFile, RepoInfo, RepoRef

__all__ = [
    "SourceFetcher",
    "GitHubClient",
    "parse_repository",
    "RemoteFile",
    "RepoInfo",
    "RepoRef",
]
