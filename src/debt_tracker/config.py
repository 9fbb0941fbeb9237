"""Configuration loading and management for debt-tracker.

Configuration sources are merged in priority order:
    1. Defaults (defined in TrackerConfig)
    2. Global config (~/.debt-tracker.toml)
    3. Project config (./debt-tracker.toml)
    4. Explicit config file
    5. Environment variables (DEBT_TRACKER_* prefix, plus GITHUB_TOKEN / LLM_API_KEY)
    6. Keyword overrides (CLI flags)

Example:
    >>> config = load_config(max_files=20)
    >>> config.max_files
    20
"""

from __future__ import annotations

import hashlib
import json
import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError

Verbosity = Literal["quiet", "normal", "verbose"]

# Hard ceilings imposed by the upstream contract, not user-tunable beyond these.
MAX_SNAPSHOT_FILES = 40
MAX_HISTORY_COMMITS = 30


@dataclass(frozen=True)
class TrackerConfig:
    """Configuration for snapshot and history analysis.

    Attributes:
        GitHub access:
            github_token: Token sent as ``Authorization: token ...`` (optional)
            github_api_url: REST API base URL
            request_timeout_seconds: Per-request timeout for all HTTP calls

        Source fetching:
            code_extensions: File extensions considered source code
            excluded_dirs: Directory names never descended into
            max_files: Maximum files per snapshot (capped at 40)
            max_file_size_bytes: Skip listed files larger than this
            max_content_chars: Skip fetched content longer than this
            workers: Parallel fetch/score workers (None = auto)

        History:
            default_commit_count: Commits analyzed when none requested
            max_patch_files: Files scored per commit

        Graph:
            max_edges: Propagation edge cap

        Caching:
            cache_enabled, cache_dir, cache_ttl_hours, cache_size_limit_mb

        LLM second opinion:
            llm_api_key, llm_base_url, llm_model, llm_max_chars

        Persistence:
            history_db_path: SQLite file for saved rollups

        Output:
            verbosity: Logging verbosity level
    """

    # GitHub access
    github_token: Optional[str] = None
    github_api_url: str = "https://api.github.com"
    request_timeout_seconds: int = 30

    # Source fetching
    code_extensions: list[str] = field(
        default_factory=lambda: [
            ".ts", ".tsx", ".js", ".jsx", ".py", ".java", ".go", ".rs", ".rb", ".php",
            ".c", ".cpp", ".h", ".hpp", ".cs", ".swift", ".kt", ".scala", ".vue", ".svelte",
        ]
    )
    excluded_dirs: list[str] = field(
        default_factory=lambda: [
            "node_modules",
            "vendor",
            "dist",
            "build",
            "__pycache__",
            "venv",
        ]
    )
    max_files: int = MAX_SNAPSHOT_FILES
    max_file_size_bytes: int = 200_000
    max_content_chars: int = 100_000
    workers: Optional[int] = None

    # History
    default_commit_count: int = 15
    max_patch_files: int = 10

    # Graph
    max_edges: int = 35

    # Caching
    cache_enabled: bool = True
    cache_dir: str = ".debt-tracker-cache"
    cache_ttl_hours: int = 1
    cache_size_limit_mb: int = 64

    # LLM second opinion
    llm_api_key: Optional[str] = None
    llm_base_url: str = "https://ai.gateway.lovable.dev/v1"
    llm_model: str = "google/gemini-3-flash-preview"
    llm_max_chars: int = 8000

    # Persistence
    history_db_path: str = ".debt-tracker/history.db"

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.request_timeout_seconds < 1:
            raise ValueError("request_timeout_seconds must be at least 1")

        if not 1 <= self.max_files <= MAX_SNAPSHOT_FILES:
            raise ValueError(f"max_files must be between 1 and {MAX_SNAPSHOT_FILES}")
        if self.max_file_size_bytes <= 0:
            raise ValueError("max_file_size_bytes must be positive")
        if self.max_content_chars <= 0:
            raise ValueError("max_content_chars must be positive")
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")

        if not 1 <= self.default_commit_count <= MAX_HISTORY_COMMITS:
            raise ValueError(
                f"default_commit_count must be between 1 and {MAX_HISTORY_COMMITS}"
            )
        if self.max_patch_files < 1:
            raise ValueError("max_patch_files must be at least 1")

        if self.max_edges < 0:
            raise ValueError("max_edges must be non-negative")

        if self.cache_ttl_hours < 0:
            raise ValueError("cache_ttl_hours must be non-negative")
        if self.cache_size_limit_mb < 1:
            raise ValueError("cache_size_limit_mb must be at least 1")

        if self.llm_max_chars < 1:
            raise ValueError("llm_max_chars must be at least 1")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")

        for ext in self.code_extensions:
            if not ext.startswith("."):
                raise ValueError(f"code extension must start with '.': {ext!r}")

    @property
    def cache_ttl_seconds(self) -> int:
        """Get cache TTL in seconds."""
        return self.cache_ttl_hours * 3600

    @property
    def cache_size_limit_bytes(self) -> int:
        return self.cache_size_limit_mb * 1024 * 1024

    def config_hash(self) -> str:
        """Hash of the settings that change analysis output (for cache keys)."""
        relevant = {
            "code_extensions": sorted(self.code_extensions),
            "excluded_dirs": sorted(self.excluded_dirs),
            "max_files": self.max_files,
            "max_file_size_bytes": self.max_file_size_bytes,
            "max_content_chars": self.max_content_chars,
            "max_patch_files": self.max_patch_files,
            "max_edges": self.max_edges,
        }
        return compute_config_hash(relevant)

    def redacted(self) -> dict[str, Any]:
        """Settings as a dict with secrets masked (for display/logging)."""
        data = asdict(self)
        for key in ("github_token", "llm_api_key"):
            if data.get(key):
                data[key] = "***"
        return data


def compute_config_hash(config: dict) -> str:
    """
    Compute hash of configuration for cache invalidation.

    Args:
        config: Configuration dictionary

    Returns:
        Truncated SHA256 hash of configuration
    """
    config_str = json.dumps(config, sort_keys=True)
    return hashlib.sha256(config_str.encode()).hexdigest()[:16]


def load_config(config_file: Optional[Path] = None, **overrides) -> TrackerConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated TrackerConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing, or a value
            fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".debt-tracker.toml"
    if global_config.exists():
        merged.update(_load_toml_section(global_config, "global config"))

    project_config = Path.cwd() / "debt-tracker.toml"
    if project_config.exists():
        merged.update(_load_toml_section(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_section(config_file, "config file"))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return TrackerConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from DEBT_TRACKER_* environment variables.

    GITHUB_TOKEN and LLM_API_KEY are honoured as fallbacks for the two
    secrets when the prefixed variables are absent.
    """
    type_hints = get_type_hints(TrackerConfig)

    result: dict[str, Any] = {}

    for field_name in TrackerConfig.__dataclass_fields__:
        env_key = f"DEBT_TRACKER_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")

    if "github_token" not in result and os.environ.get("GITHUB_TOKEN"):
        result["github_token"] = os.environ["GITHUB_TOKEN"]
    if "llm_api_key" not in result and os.environ.get("LLM_API_KEY"):
        result["llm_api_key"] = os.environ["LLM_API_KEY"]

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the field's type.

    Returns None for types that cannot be expressed as a single string
    (lists), which leaves the field at its default.
    """
    origin = getattr(type_hint, "__origin__", None)

    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_section(path: Path, label: str) -> dict:
    """Load a TOML file, accepting either top-level keys or a [debt-tracker] table."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")
    section = data.get("debt-tracker")
    if isinstance(section, dict):
        return section
    return data
