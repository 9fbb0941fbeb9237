"""LLM second-opinion command."""

import json
from pathlib import Path

import typer
from rich.panel import Panel

from ..api import second_opinion
from ..formatters import verdict_to_dict
from . import app
from ._common import console, handle_errors, resolve_config


@app.command()
def detect(
    ctx: typer.Context,
    file: Path = typer.Argument(
        ...,
        help="Source file to assess",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Ask the configured LLM whether a file looks machine-generated.

    Needs an API key in DEBT_TRACKER_LLM_API_KEY (or LLM_API_KEY).
    """
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))

    with handle_errors(verbose):
        settings = resolve_config()
        code = file.read_text(encoding="utf-8", errors="replace")
        verdict = second_opinion(code, filename=file.name, config=settings)

        if json_output:
            print(json.dumps(verdict_to_dict(verdict), indent=2))
            return

        lines = [
            f"Verdict:        [bold]{verdict.verdict}[/bold]",
            f"AI probability: {verdict.ai_probability:.2f}",
            f"Confidence:     {verdict.confidence:.2f}",
        ]
        if verdict.explanation:
            lines += ["", verdict.explanation]
        if verdict.signals:
            lines += ["", "[bold]Signals:[/bold]"] + [f"  - {s}" for s in verdict.signals]
        console.print(
            Panel("\n".join(lines), title=f"[bold cyan]{file.name}[/bold cyan]", expand=False)
        )
