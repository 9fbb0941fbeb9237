"""Shared CLI helpers."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console

from ..config import TrackerConfig, load_config
from ..exceptions import (
    ConfigurationError,
    DebtTrackerError,
    EmptyResultError,
    SecondaryServiceDegradedError,
    UpstreamUnavailableError,
)
from ..logging_config import get_logger

console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)

EXIT_EMPTY_RESULT = 1
EXIT_INVALID_INPUT = 2
EXIT_SECONDARY_DEGRADED = 3
EXIT_UPSTREAM_UNAVAILABLE = 4


def exit_code_for(error: DebtTrackerError) -> int:
    """Map an error kind to the process exit code."""
    if isinstance(error, ConfigurationError):
        return EXIT_INVALID_INPUT
    if isinstance(error, SecondaryServiceDegradedError):
        return EXIT_SECONDARY_DEGRADED
    if isinstance(error, UpstreamUnavailableError):
        return EXIT_UPSTREAM_UNAVAILABLE
    if isinstance(error, EmptyResultError):
        return EXIT_EMPTY_RESULT
    return 1


@contextmanager
def handle_errors(verbose: bool = False) -> Iterator[None]:
    """Translate library errors into a message and a distinct exit code."""
    try:
        yield
    except typer.Exit:
        raise
    except DebtTrackerError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(exit_code_for(e))
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error")
        err_console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            err_console.print_exception()
        raise typer.Exit(1)


def resolve_config(
    config: Optional[Path] = None,
    no_cache: bool = False,
    workers: Optional[int] = None,
    **overrides,
) -> TrackerConfig:
    """Build settings from CLI options."""
    if no_cache:
        overrides["cache_enabled"] = False
    if workers is not None:
        overrides["workers"] = workers
    return load_config(config_file=config, **overrides)
