"""Shared test fixtures for debt-tracker tests."""

import os
from collections import Counter

import pytest

from debt_tracker.analysis import SnapshotAnalyzer, timeline_from_commits
from debt_tracker.config import TrackerConfig
from debt_tracker.sources import RemoteFile, RepoInfo, RepoRef, SourceFetcher
from debt_tracker.temporal import CommitDiff, FilePatch


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep user config files and credentials out of every test."""
    for var in ("GITHUB_TOKEN", "LLM_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    for key in list(os.environ):
        if key.startswith("DEBT_TRACKER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config(tmp_path):
    """Config with caching disabled and storage under tmp_path."""
    return TrackerConfig(
        cache_enabled=False,
        cache_dir=str(tmp_path / "cache"),
        history_db_path=str(tmp_path / "history.db"),
    )


# ── Source texts ─────────────────────────────────────────────────


@pytest.fixture
def clean_python():
    """Small, readable, human-looking module."""
    return '''"""Tokenizer for the arithmetic shell."""

import re

TOKEN_PATTERN = re.compile(r"\\s*(?:(\\d+)|(.))")


def tokenize(expression):
    tokens = []
    for number, operator in TOKEN_PATTERN.findall(expression):
        if number:
            tokens.append(("NUM", int(number)))
        elif operator.strip():
            tokens.append(("OP", operator))
    return tokens


def evaluate(tokens):
    total = 0
    sign = 1
    for kind, payload in tokens:
        if kind == "NUM":
            total += sign * payload
        elif payload == "-":
            sign = -1
        else:
            sign = 1
    return total
'''


@pytest.fixture
def generated_js():
    """Boilerplate-heavy JavaScript with generic names and restating comments."""
    functions = []
    for name in ("getUser", "getOrder", "getInvoice", "getProduct", "getCustomer"):
        functions.append(
            f"""// Get the data
async function {name}(data) {{
  // Create the result
  const result = await fetch(data.url);
  // Return the value
  const value = await result.json();
  return value;
}}
"""
        )
    return "\n".join(functions)


def _added_patch(lines):
    return "\n".join("+" + line for line in lines)


@pytest.fixture
def neutral_commit():
    """One added, one removed plain line: zero deltas and a growth factor of 1."""

    def _make(sha="a" * 40, author="alice"):
        return CommitDiff(
            sha=sha,
            message="tidy",
            author=author,
            timestamp="2024-01-01T00:00:00Z",
            files=[FilePatch("src/app.py", "+keep going\n-kept going", 1, 1)],
            additions=1,
            deletions=1,
        )

    return _make


@pytest.fixture
def growth_commit():
    """A single file adding 120 plain, unique lines and deleting nothing."""

    def _make(sha="b" * 40, author="bob"):
        lines = [f"let entry{i} = source;" for i in range(120)]
        return CommitDiff(
            sha=sha,
            message="add a large module",
            author=author,
            timestamp="2024-01-02T00:00:00Z",
            files=[FilePatch("src/big.js", _added_patch(lines), 120, 0)],
            additions=120,
            deletions=0,
        )

    return _make


# ── Fake repository source ──────────────────────────────────────


class FakeFetcher(SourceFetcher):
    """In-memory SourceFetcher serving fixed files and commits."""

    def __init__(self, files=None, commits=None, stars=7, language="Python"):
        self.files = dict(files or {})
        self.commits = list(commits or [])
        self.stars = stars
        self.language = language
        self.calls = Counter()
        self.closed = False

    def get_repository(self, ref):
        self.calls["get_repository"] += 1
        return RepoInfo(full_name=ref.full_name, stars=self.stars, language=self.language)

    def list_code_files(self, ref):
        self.calls["list_code_files"] += 1
        return [
            RemoteFile(path=path, name=path.rsplit("/", 1)[-1], size=len(text or ""),
                       download_url=f"mem://{path}")
            for path, text in self.files.items()
        ]

    def fetch_file_text(self, remote):
        self.calls["fetch_file_text"] += 1
        return self.files.get(remote.path)

    def history(self, ref, count):
        self.calls["history"] += 1
        return self.commits[-count:]

    def close(self):
        self.closed = True


@pytest.fixture
def fake_fetcher(clean_python, generated_js):
    """Factory for FakeFetcher; defaults to a two-file repository."""

    def _make(files=None, commits=None, **kwargs):
        if files is None:
            files = {"src/calc.py": clean_python, "web/users.js": generated_js}
        return FakeFetcher(files=files, commits=commits, **kwargs)

    return _make


@pytest.fixture
def snapshot_result(fake_fetcher, config):
    return SnapshotAnalyzer(fake_fetcher(), config).analyze(RepoRef("octo", "widgets"))


@pytest.fixture
def history_result(neutral_commit, growth_commit):
    commits = [
        neutral_commit(sha="1" * 40, author="alice"),
        growth_commit(sha="2" * 40, author="bob"),
        neutral_commit(sha="3" * 40, author="alice"),
    ]
    return timeline_from_commits("octo/widgets", commits)
