"""Rich table formatter for coupling reports."""

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..temporal.models import CouplingRecord
from .base import HEADER, BaseFormatter


def _confidence_style(conf: float) -> str:
    if conf >= 0.75:
        return "red bold"
    elif conf >= 0.5:
        return "yellow"
    else:
        return "dim"


class TableFormatter(BaseFormatter):
    """Terminal table, one row per changed file and coupled candidate."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def build_table(self, records: List[CouplingRecord]) -> Table:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column(HEADER[0])
        table.add_column(HEADER[1])
        table.add_column(HEADER[2], justify="right")
        table.add_column(HEADER[3], justify="right")
        for r in records:
            table.add_row(
                escape(r.path),
                escape(r.coupled_path),
                str(r.shared_commits),
                f"[{_confidence_style(r.confidence)}]{r.display_confidence:.2f}[/]",
            )
        return table

    def render(self, records: List[CouplingRecord]) -> None:
        if not records:
            self.console.print("[bold green]No forgotten files detected.[/bold green]")
            return
        self.console.print(self.build_table(records))

    def format(self, records: List[CouplingRecord]) -> str:
        console = Console(width=200, color_system=None)
        with console.capture() as capture:
            console.print(self.build_table(records))
        return capture.get()
