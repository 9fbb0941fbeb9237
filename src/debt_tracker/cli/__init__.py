"""CLI entry point: registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ..logging_config import setup_logging
from ._common import console

app = typer.Typer(
    name="debt-tracker",
    help="debt-tracker - Technical, cognitive and AI-originated debt estimates for GitHub repositories",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    """Estimate debt from lexical heuristics and commit history."""
    if version:
        console.print(f"[bold cyan]debt-tracker[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)
    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    ctx.obj = {"verbose": verbose, "quiet": quiet}


def main() -> None:
    app()


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .history import history as _history  # noqa: F401, E402
from .detect import detect as _detect  # noqa: F401, E402
from .saved import saved as _saved  # noqa: F401, E402
from .cache import cache_info as _cache_info, cache_clear as _cache_clear  # noqa: F401, E402
