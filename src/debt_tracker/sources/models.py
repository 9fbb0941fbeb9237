"""Data models for remote repository sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RepoRef:
    """An ``owner/name`` repository coordinate."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class RepoInfo:
    full_name: str
    stars: int = 0
    language: Optional[str] = None


@dataclass(frozen=True)
class RemoteFile:
    """A listed source file, not yet downloaded."""

    path: str
    name: str
    size: int
    download_url: Optional[str]
