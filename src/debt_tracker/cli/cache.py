"""Cache management commands."""

import typer

from ..cache import ResultCache
from . import app
from ._common import console, resolve_config


@app.command()
def cache_info():
    """Show cache information and statistics."""
    settings = resolve_config()
    cache = ResultCache.from_config(settings)
    try:
        stats = cache.stats()
    finally:
        cache.close()

    console.print("[bold cyan]debt-tracker Cache Info[/bold cyan]")
    console.print()

    if stats.get("enabled"):
        console.print("Status: [green]Enabled[/green]")
        console.print(f"Directory: [blue]{stats.get('directory', 'N/A')}[/blue]")
        console.print(f"Entries: [yellow]{stats.get('size', 0)}[/yellow]")
        console.print(f"Size: [yellow]{stats.get('volume', 0)} bytes[/yellow]")
        console.print(f"TTL: [yellow]{settings.cache_ttl_hours}h[/yellow]")
    else:
        console.print("Status: [red]Disabled[/red]")


@app.command()
def cache_clear():
    """Clear the result cache."""
    settings = resolve_config()
    if not settings.cache_enabled:
        console.print("[yellow]Cache is disabled[/yellow]")
        raise typer.Exit(0)

    cache = ResultCache.from_config(settings)
    try:
        cache.clear()
    finally:
        cache.close()
    console.print("[green]Cache cleared successfully[/green]")
