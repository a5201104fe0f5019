"""CLI entry point that registers all subcommands."""

import typer

app = typer.Typer(
    name="did-i-forget",
    help="did-i-forget - warn about files usually changed together with yours",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .analyze import main as _main_callback  # noqa: F401, E402
from .cache import cache_info as _cache_info, cache_clear as _cache_clear  # noqa: F401, E402
