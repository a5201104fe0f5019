"""Cache management commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..exceptions import DidIForgetError
from ..temporal import HistoryCache, resolve_fingerprint
from . import app
from ._common import console, resolve_config


@app.command()
def cache_info(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
):
    """Show history cache location, size and freshness."""
    try:
        settings = resolve_config(config=config, path=ctx.obj.get("path"))
        fingerprint = resolve_fingerprint(settings.master, settings.repo_path)
    except DidIForgetError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    stats = HistoryCache(settings.cache_path, fingerprint).stats()

    console.print("[bold cyan]did-i-forget cache info[/bold cyan]")
    console.print()
    console.print(f"File: [blue]{stats['path']}[/blue]")
    if not stats["exists"]:
        console.print("Status: [yellow]Not built[/yellow]")
        return
    console.print(f"Size: [yellow]{stats['size']} bytes[/yellow]")
    console.print(f"Built for: [yellow]{stats.get('fingerprint', 'unreadable')}[/yellow]")
    console.print(f"{settings.master}: [yellow]{fingerprint}[/yellow]")
    if stats["valid"]:
        console.print("Status: [green]Fresh[/green]")
    else:
        console.print("Status: [red]Stale[/red]")


@app.command()
def cache_clear(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
):
    """Delete the history cache."""
    try:
        settings = resolve_config(config=config, path=ctx.obj.get("path"))
    except DidIForgetError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    cache_file = settings.cache_path
    if not cache_file.exists():
        console.print("[yellow]No cache to clear[/yellow]")
        raise typer.Exit(0)

    # Fingerprint is irrelevant for deletion
    HistoryCache(cache_file, fingerprint="").invalidate()
    console.print("[green]Cache cleared successfully[/green]")
