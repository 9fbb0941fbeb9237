"""GitHub REST source for file snapshots and commit history."""

from __future__ import annotations

import re
from collections import deque
from pathlib import PurePosixPath
from typing import Any, Optional

import httpx

from ..config import MAX_HISTORY_COMMITS, TrackerConfig
from ..exceptions import InvalidRepositoryError, UpstreamUnavailableError
from ..logging_config import get_logger
from ..temporal.models import CommitDiff, FilePatch
from .base import SourceFetcher
from .models import RemoteFile, RepoInfo, RepoRef

logger = get_logger(__name__)

USER_AGENT = "AIDebtTracker"
SERVICE = "GitHub"

_URL_RE = re.compile(r"github\.com[/:]([^/\s]+)/([^/\s]+)")
_SHORT_RE = re.compile(r"^([\w.-]+)/([\w.-]+)$")


def parse_repository(identifier: str) -> RepoRef:
    """Parse a GitHub URL or ``owner/repo`` shorthand.

    Trailing slashes, a ``.git`` suffix and any path below the repository
    (``/tree/main`` and the like) are ignored.

    Raises:
        InvalidRepositoryError: If no owner/repo pair can be extracted
    """
    text = (identifier or "").strip().rstrip("/")
    if "github.com" in text:
        match = _URL_RE.search(text)
    else:
        match = _SHORT_RE.match(text)
    if not match:
        raise InvalidRepositoryError(identifier)

    owner, name = match.group(1), match.group(2)
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not owner or not name:
        raise InvalidRepositoryError(identifier)
    return RepoRef(owner=owner, name=name)


class GitHubClient(SourceFetcher):
    """Fetches repository contents and commit diffs over the REST API.

    Pass ``client`` (e.g. one built on ``httpx.MockTransport``) to control
    transport; otherwise a client is created from config and owned here.
    """

    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.config = config or TrackerConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=self.config.github_api_url,
            timeout=httpx.Timeout(self.config.request_timeout_seconds),
            follow_redirects=True,
        )
        self._extensions = {ext.lower() for ext in self.config.code_extensions}
        self._excluded = set(self.config.excluded_dirs)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        if self.config.github_token:
            headers["Authorization"] = f"token {self.config.github_token}"
        return headers

    def _get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET a REST resource, mapping every failure to UpstreamUnavailableError."""
        try:
            response = self._client.get(path, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(SERVICE, str(e)) from e

        if not response.is_success:
            try:
                reason = response.json().get("message", response.text)
            except ValueError:
                reason = response.text or f"HTTP {response.status_code}"
            raise UpstreamUnavailableError(
                SERVICE, f"GitHub API {response.status_code}: {reason}", response.status_code
            )
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(
                SERVICE, f"Malformed response body: {e}", response.status_code
            ) from e

    # -- snapshot ---------------------------------------------------------

    def get_repository(self, ref: RepoRef) -> RepoInfo:
        data = self._get_json(f"/repos/{ref.owner}/{ref.name}")
        return RepoInfo(
            full_name=data.get("full_name") or ref.full_name,
            stars=int(data.get("stargazers_count") or 0),
            language=data.get("language"),
        )

    def _is_code_file(self, item: dict[str, Any]) -> bool:
        suffix = PurePosixPath(item.get("name", "")).suffix.lower()
        if suffix not in self._extensions:
            return False
        return int(item.get("size") or 0) <= self.config.max_file_size_bytes

    def _is_walkable_dir(self, item: dict[str, Any]) -> bool:
        name = item.get("name", "")
        return not name.startswith(".") and name not in self._excluded

    def list_code_files(self, ref: RepoRef) -> list[RemoteFile]:
        """Breadth-first walk of the contents API.

        Only a failure listing the repository root is fatal; unreadable
        subdirectories are skipped.
        """
        limit = self.config.max_files
        files: list[RemoteFile] = []
        pending: deque[str] = deque([""])

        while pending and len(files) < limit:
            path = pending.popleft()
            try:
                items = self._get_json(f"/repos/{ref.owner}/{ref.name}/contents/{path}")
            except UpstreamUnavailableError:
                if not path:
                    raise
                logger.debug(f"Skipping unreadable directory {path}")
                continue

            if isinstance(items, dict):
                items = [items]
            if not isinstance(items, list):
                logger.debug(f"Skipping unexpected listing for {path or '/'}")
                continue

            for item in items:
                kind = item.get("type")
                if kind == "file" and self._is_code_file(item):
                    files.append(
                        RemoteFile(
                            path=item.get("path", item.get("name", "")),
                            name=item.get("name", ""),
                            size=int(item.get("size") or 0),
                            download_url=item.get("download_url"),
                        )
                    )
                    if len(files) >= limit:
                        break
                elif kind == "dir" and self._is_walkable_dir(item):
                    pending.append(item.get("path", item.get("name", "")))

        logger.debug(f"Listed {len(files)} code files in {ref}")
        return files[:limit]

    def fetch_file_text(self, remote: RemoteFile) -> Optional[str]:
        if not remote.download_url:
            return None
        try:
            response = self._client.get(remote.download_url, headers=self._headers())
        except httpx.HTTPError as e:
            logger.debug(f"Skipping {remote.path}: {e}")
            return None
        if not response.is_success:
            logger.debug(f"Skipping {remote.path}: HTTP {response.status_code}")
            return None

        text = response.text
        if len(text) > self.config.max_content_chars:
            logger.debug(f"Skipping {remote.path}: {len(text)} chars over ceiling")
            return None
        return text

    # -- history ----------------------------------------------------------

    def list_commits(self, ref: RepoRef, count: int) -> list[dict[str, Any]]:
        """Most recent commits, newest first, at most 30."""
        per_page = max(1, min(count, MAX_HISTORY_COMMITS))
        commits = self._get_json(
            f"/repos/{ref.owner}/{ref.name}/commits", params={"per_page": per_page}
        )
        if not isinstance(commits, list):
            raise UpstreamUnavailableError(SERVICE, "Commit listing is not an array")
        return commits[:per_page]

    def fetch_commit_diff(self, ref: RepoRef, commit: dict[str, Any]) -> CommitDiff:
        """Detail for one listed commit; degraded when the detail call fails."""
        sha = commit.get("sha", "")
        meta = commit.get("commit") or {}
        author_meta = meta.get("author") or {}
        author = (
            author_meta.get("name")
            or (commit.get("author") or {}).get("login")
            or "unknown"
        )
        message = meta.get("message") or ""
        timestamp = author_meta.get("date") or ""

        try:
            detail = self._get_json(f"/repos/{ref.owner}/{ref.name}/commits/{sha}")
            if not isinstance(detail, dict):
                raise UpstreamUnavailableError(SERVICE, "Commit detail is not an object")
        except UpstreamUnavailableError as e:
            logger.warning(f"Commit {sha[:7]} detail unavailable: {e}")
            return CommitDiff(
                sha=sha, message=message, author=author, timestamp=timestamp, degraded=True
            )

        stats = detail.get("stats") or {}
        files = [
            FilePatch(
                filename=f.get("filename", ""),
                patch=f.get("patch") or "",
                additions=int(f.get("additions") or 0),
                deletions=int(f.get("deletions") or 0),
            )
            for f in detail.get("files") or []
        ]
        return CommitDiff(
            sha=sha,
            message=message,
            author=author,
            timestamp=timestamp,
            files=files,
            additions=int(stats.get("additions") or 0),
            deletions=int(stats.get("deletions") or 0),
        )

    def history(self, ref: RepoRef, count: int) -> list[CommitDiff]:
        listed = self.list_commits(ref, count)
        # Listing is newest first; detail fetches run in commit order.
        return [self.fetch_commit_diff(ref, commit) for commit in reversed(listed)]

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
