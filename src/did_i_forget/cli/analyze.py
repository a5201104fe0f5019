"""Main command: report files usually changed together with the current changes."""

from pathlib import Path
from typing import Optional

import click
import typer
from rich.markup import escape

from ..api import run
from ..exceptions import DidIForgetError
from ..formatters import get_formatter
from ..logging_config import setup_logging
from ..temporal import HistoryCache
from . import app
from ._common import console, resolve_config


@app.callback(invoke_without_command=True, no_args_is_help=False)
def main(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Repository root to analyze (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Minimum confidence to report (0.0 - 1.0, default 0.5)",
        min=0.0,
        max=1.0,
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        "-n",
        help="Coupled files reported per changed file (default 1)",
        min=1,
    ),
    cache: bool = typer.Option(
        False,
        "--cache",
        "-c",
        help="Cache the commit log between runs",
    ),
    cache_file: Optional[str] = typer.Option(
        None,
        "--cache-file",
        help="Path to cache (default .did-i-forget-cache)",
    ),
    clear_cache: bool = typer.Option(
        False,
        "--clear-cache",
        help="Delete the cache before running",
    ),
    fmt: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: table (default) or csv",
        click_type=click.Choice(["table", "csv"], case_sensitive=False),
    ),
    master: Optional[str] = typer.Option(
        None,
        "--master",
        "-m",
        help="Analyze against branch (default origin/master)",
    ),
    normalize: Optional[str] = typer.Option(
        None,
        "--normalize",
        help="Confidence denominator: coupled (default) or changed file's commit count",
        click_type=click.Choice(["coupled", "changed"], case_sensitive=False),
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Reduce logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Warn about files that usually change together with the ones you changed.

    Reads the whole git history, counts how often each changed file was
    committed together with every other file, and reports the most tightly
    coupled files you have not touched.

    [bold cyan]Examples:[/bold cyan]

      did-i-forget

      did-i-forget --master origin/main --threshold 0.7

      did-i-forget --cache --top 3 --format csv
    """
    ctx.ensure_object(dict)
    ctx.obj["path"] = path

    if ctx.invoked_subcommand is not None:
        return

    from .. import __version__

    if version:
        console.print(f"[bold cyan]did-i-forget[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    if verbose and quiet:
        console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)

    logger = setup_logging(
        verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None
    )

    try:
        settings = resolve_config(
            config=config,
            path=path,
            threshold=threshold,
            top_n=top,
            cache=True if cache else None,
            cache_file=cache_file,
            output_format=fmt.lower() if fmt else None,
            master=master,
            normalization=normalize.lower() if normalize else None,
            verbose=verbose,
            quiet=quiet,
        )
        logger.debug("Loaded settings: %s", settings)

        if clear_cache:
            HistoryCache(settings.cache_path, fingerprint="").invalidate()

        if settings.quiet:
            records = run(settings)
        else:
            with console.status("[cyan]Reading git history...") as status:

                def progress(processed: int) -> None:
                    status.update(f"[cyan]Processed {processed} commits...")

                records = run(settings, progress=progress)

        get_formatter(settings.output_format).render(records)

    except DidIForgetError as e:
        logger.debug("%s: %s", e.__class__.__name__, e)
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
