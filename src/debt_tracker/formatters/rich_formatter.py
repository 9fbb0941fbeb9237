"""Rich terminal formatter for debt-tracker."""

from typing import Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..analysis.models import HistoryResult, SnapshotResult
from .base import BaseFormatter

MAX_ISSUES_SHOWN = 3
PRIORITY_COLORS = {"critical": "red", "high": "yellow", "medium": "cyan"}


def _score_label(score: float) -> str:
    if score >= 0.6:
        return f"[red bold]{score:.2f}[/red bold]"
    elif score >= 0.4:
        return f"[yellow]{score:.2f}[/yellow]"
    else:
        return f"[green]{score:.2f}[/green]"


def _trend_label(trend: str) -> str:
    colors = {
        "increasing": "red",
        "unstable": "yellow",
        "improving": "green",
        "fluctuating": "cyan",
    }
    color = colors.get(trend, "white")
    return f"[{color}]{trend}[/{color}]"


def sparkline(values: Sequence[float]) -> str:
    """Generate an ASCII sparkline from a list of numeric values."""
    if not values:
        return ""
    blocks = " ▁▂▃▄▅▆▇█"
    mn, mx = min(values), max(values)
    if mx == mn:
        return blocks[4] * len(values)
    return "".join(blocks[min(8, int((v - mn) / (mx - mn) * 8))] for v in values)


class RichFormatter(BaseFormatter):
    """Summary panel plus per-file or per-commit tables."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def format_snapshot(self, result: SnapshotResult) -> str:
        with self.console.capture() as capture:
            self.render_snapshot(result)
        return capture.get()

    def format_history(self, result: HistoryResult) -> str:
        with self.console.capture() as capture:
            self.render_history(result)
        return capture.get()

    def render_snapshot(self, result: SnapshotResult) -> None:
        s = result.summary
        lines = [
            f"[bold]{result.repo_name}[/bold]  {result.language}  ★ {result.stars}",
            "",
            f"Files analyzed:      {result.total_files}",
            f"AI likelihood:       {_score_label(s.avg_ai_likelihood)}",
            f"Technical debt:      {_score_label(s.avg_technical_debt)}",
            f"Cognitive debt:      {_score_label(s.avg_cognitive_debt)}",
            f"Issues:              {s.total_issues}",
            f"High-risk files:     {s.high_risk_files}",
        ]
        if s.top_refactor_targets:
            lines.append("")
            lines.append("[bold]Refactor first:[/bold]")
            lines.extend(f"  {path}" for path in s.top_refactor_targets)
        self.console.print(
            Panel("\n".join(lines), title="[bold cyan]Debt Snapshot[/bold cyan]", expand=False)
        )

        table = Table(show_header=True, show_lines=False, pad_edge=True)
        table.add_column("File", style="bold", overflow="fold")
        table.add_column("AI", justify="right")
        table.add_column("Tech", justify="right")
        table.add_column("Cog", justify="right")
        table.add_column("LOC", justify="right", style="dim")
        table.add_column("Issues")

        for f in sorted(result.files, key=lambda f: f.combined_debt, reverse=True):
            issues = ", ".join(f.issues[:MAX_ISSUES_SHOWN])
            if len(f.issues) > MAX_ISSUES_SHOWN:
                issues += f" (+{len(f.issues) - MAX_ISSUES_SHOWN})"
            table.add_row(
                f.path,
                _score_label(f.ai_likelihood),
                _score_label(f.technical_debt),
                _score_label(f.cognitive_debt),
                str(f.lines_of_code),
                issues,
            )
        self.console.print(table)

        if result.propagation:
            self.console.print(
                f"[dim]{len(result.propagation)} propagation edges "
                f"(use --json for the full graph)[/dim]"
            )

        if result.recommendations:
            self.render_recommendations(result)

    def render_recommendations(self, result: SnapshotResult) -> None:
        lines = []
        for rec in result.recommendations:
            color = PRIORITY_COLORS.get(rec.priority, "white")
            lines.append(
                f"[{color} bold]{rec.priority.upper():<8}[/{color} bold] [bold]{rec.path}[/bold]"
                f"  [dim]~{rec.impact_percent}% of total debt[/dim]"
            )
            lines.extend(f"  › {step}" for step in rec.steps)
            lines.append("")
        self.console.print(
            Panel(
                "\n".join(lines).rstrip(),
                title="[bold cyan]Refactor Plan[/bold cyan]",
                expand=False,
            )
        )

    def render_history(self, result: HistoryResult) -> None:
        s = result.summary
        tech = [c.tech_debt for c in result.commits]
        cog = [c.cog_debt for c in result.commits]
        p = s.prediction

        lines = [
            f"[bold]{result.repo_name}[/bold]  last {len(result.commits)} commits",
            "",
            f"Trend:     {_trend_label(s.trend)}",
            f"Momentum:  {s.momentum}",
            f"Spikes:    {s.spike_count}",
            "",
            f"Tech  {sparkline(tech)}  → {p.tech_debt_5:.2f} (+5)  {p.tech_debt_10:.2f} (+10)",
            f"Cog   {sparkline(cog)}  → {p.cog_debt_5:.2f} (+5)  {p.cog_debt_10:.2f} (+10)",
        ]
        if result.degraded_count:
            lines.append("")
            lines.append(
                f"[yellow]{result.degraded_count} commit(s) analyzed without detail[/yellow]"
            )
        self.console.print(
            Panel("\n".join(lines), title="[bold cyan]Debt Timeline[/bold cyan]", expand=False)
        )

        table = Table(show_header=True, show_lines=False, pad_edge=True)
        table.add_column("Commit", style="dim", max_width=8)
        table.add_column("Date")
        table.add_column("Author")
        table.add_column("Tech", justify="right")
        table.add_column("Cog", justify="right")
        table.add_column("AI", justify="right")
        table.add_column("Summary", overflow="fold")

        for c in result.commits:
            marker = " [red]▲[/red]" if c.is_spike else ""
            if c.degraded:
                marker = " [yellow]?[/yellow]"
            table.add_row(
                c.short_hash,
                c.timestamp[:10],
                c.author,
                f"{c.tech_debt:.2f}",
                f"{c.cog_debt:.2f}",
                f"{c.ai_contribution:.2f}",
                c.summary + marker,
            )
        self.console.print(table)

        if result.developers:
            dev_table = Table(title="Developer Impact", show_header=True, pad_edge=True)
            dev_table.add_column("Developer", style="bold")
            dev_table.add_column("Commits", justify="right")
            dev_table.add_column("Tech", justify="right")
            dev_table.add_column("Cog", justify="right")
            dev_table.add_column("Total", justify="right")
            for d in result.developers:
                color = "red" if d.total_impact > 0 else "green"
                dev_table.add_row(
                    d.name,
                    str(d.commit_count),
                    f"{d.tech_impact:+.3f}",
                    f"{d.cog_impact:+.3f}",
                    f"[{color}]{d.total_impact:+.3f}[/{color}]",
                )
            self.console.print(dev_table)
