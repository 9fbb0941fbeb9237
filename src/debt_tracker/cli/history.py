"""Commit timeline command."""

from pathlib import Path
from typing import Optional

import typer

from ..api import analyze_history
from ..cache import ResultCache
from ..formatters import RichFormatter, get_formatter
from . import app
from ._common import console, handle_errors, resolve_config


@app.command()
def history(
    ctx: typer.Context,
    repository: str = typer.Argument(..., help="GitHub URL or owner/repo"),
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-n",
        help="Number of recent commits to analyze (default 15)",
        min=1,
        max=30,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the result cache"),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
):
    """
    Accumulate debt over a repository's recent commits.

    Commits are replayed oldest first; each one's patches adjust the running
    technical, cognitive and AI scores. Spikes, the overall trend, recent
    momentum and a linear forecast are reported alongside per-author impact.

    [bold cyan]Examples:[/bold cyan]

      debt-tracker history owner/repo

      debt-tracker history owner/repo -n 30 --json
    """
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))

    with handle_errors(verbose):
        settings = resolve_config(config, no_cache=no_cache)
        cache = ResultCache.from_config(settings)
        try:
            result = analyze_history(repository, commit_count=count, config=settings, cache=cache)
        finally:
            cache.close()

        formatter = get_formatter("json") if json_output else RichFormatter(console)
        formatter.render_history(result)
