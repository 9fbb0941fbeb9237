"""Saved-rollup commands: list, favorite and delete an actor's records."""

import json
from typing import Optional

import typer
from rich.table import Table

from ..formatters import rollup_to_dict
from ..storage import HistoryStore
from . import app
from ._common import console, err_console, handle_errors, resolve_config


@app.command()
def saved(
    ctx: typer.Context,
    actor: str = typer.Option(..., "--actor", help="Whose records to show"),
    limit: int = typer.Option(
        20,
        "--limit",
        "-n",
        help="Maximum number of records to list",
        min=1,
        max=1000,
    ),
    favorite: Optional[str] = typer.Option(
        None, "--favorite", help="Mark the record with this id as a favorite"
    ),
    unfavorite: Optional[str] = typer.Option(
        None, "--unfavorite", help="Clear the favorite flag on this record"
    ),
    delete: Optional[str] = typer.Option(None, "--delete", help="Delete the record with this id"),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    List analyses saved with [bold]analyze --save[/bold].

    Records are scoped to the given actor; other actors' records are never
    shown or modified.

    [bold cyan]Examples:[/bold cyan]

      debt-tracker saved --actor alice

      debt-tracker saved --actor alice --favorite 3f2a...

      debt-tracker saved --actor alice --delete 3f2a...
    """
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))

    with handle_errors(verbose):
        settings = resolve_config()
        with HistoryStore(settings.history_db_path) as store:
            for record_id, action, done in (
                (favorite, lambda i: store.set_favorite(actor, i, True), "Favorited"),
                (unfavorite, lambda i: store.set_favorite(actor, i, False), "Unfavorited"),
                (delete, lambda i: store.delete(actor, i), "Deleted"),
            ):
                if record_id is None:
                    continue
                if not action(record_id):
                    err_console.print(f"[yellow]No record {record_id} for {actor}[/yellow]")
                    raise typer.Exit(1)
                err_console.print(f"[green]{done}[/green] {record_id}")

            records = store.list(actor, limit=limit)

    if json_output:
        print(json.dumps([rollup_to_dict(r) for r in records], indent=2))
        return

    if not records:
        console.print("[yellow]No saved analyses.[/yellow]")
        return

    table = Table(title="Saved Analyses", show_lines=False, pad_edge=True)
    table.add_column("ID", style="dim", max_width=8)
    table.add_column("Repository", style="bold")
    table.add_column("Saved", style="green")
    table.add_column("Files", justify="right")
    table.add_column("AI", justify="right")
    table.add_column("Tech", justify="right")
    table.add_column("Cog", justify="right")
    table.add_column("High risk", justify="right", style="yellow")
    table.add_column("", style="dim")

    for r in records:
        ts = r.created_at.replace("T", " ")[:19]
        table.add_row(
            r.id[:8],
            r.repo_name,
            ts,
            str(r.total_files),
            f"{r.avg_ai_likelihood:.2f}",
            f"{r.avg_technical_debt:.2f}",
            f"{r.avg_cognitive_debt:.2f}",
            str(r.high_risk_files),
            "★" if r.is_favorite else "",
        )

    console.print()
    console.print(table)
    console.print()
