"""Snapshot analysis command."""

from pathlib import Path
from typing import Optional

import typer

from ..api import analyze_snapshot
from ..cache import ResultCache
from ..formatters import RichFormatter, get_formatter
from ..sources import parse_repository
from ..storage import HistoryStore
from . import app
from ._common import console, handle_errors, resolve_config


@app.command()
def analyze(
    ctx: typer.Context,
    repository: str = typer.Argument(..., help="GitHub URL or owner/repo"),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    save: bool = typer.Option(
        False,
        "--save",
        help="Save the summary to the local history store",
    ),
    actor: Optional[str] = typer.Option(
        None,
        "--actor",
        help="Owner of the saved record (required with --save)",
    ),
    max_files: Optional[int] = typer.Option(
        None,
        "--max-files",
        help="Maximum files to analyze",
        min=1,
        max=40,
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
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel workers (default: auto)",
        min=1,
        max=32,
        hidden=True,
    ),
):
    """
    Analyze the current files of a GitHub repository.

    Scores every code file (up to 40) for AI likelihood, technical debt and
    cognitive debt, and links them into a propagation graph.

    [bold cyan]Examples:[/bold cyan]

      debt-tracker analyze owner/repo

      debt-tracker analyze https://github.com/owner/repo --json

      debt-tracker analyze owner/repo --save --actor alice
    """
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))

    if save and not actor:
        raise typer.BadParameter("--actor is required with --save", param_hint="--actor")

    with handle_errors(verbose):
        settings = resolve_config(config, no_cache=no_cache, workers=workers, max_files=max_files)
        cache = ResultCache.from_config(settings)
        try:
            result = analyze_snapshot(repository, config=settings, cache=cache)
        finally:
            cache.close()

        if save:
            with HistoryStore(settings.history_db_path) as store:
                url = f"https://github.com/{parse_repository(repository).full_name}"
                record = store.save(actor, url, result)
            if not json_output:
                console.print(f"[green]Saved[/green] as {record.id}")

        formatter = get_formatter("json") if json_output else RichFormatter(console)
        formatter.render_snapshot(result)
