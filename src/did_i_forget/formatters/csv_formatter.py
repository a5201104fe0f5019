"""CSV formatter for coupling reports."""

import csv
import io
from typing import List

from ..temporal.models import CouplingRecord
from .base import HEADER, BaseFormatter


class CsvFormatter(BaseFormatter):
    """Render records as CSV; an empty report is just the header."""

    def render(self, records: List[CouplingRecord]) -> None:
        print(self.format(records), end="")

    def format(self, records: List[CouplingRecord]) -> str:
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(HEADER)
        for r in records:
            writer.writerow([r.path, r.coupled_path, r.shared_commits, r.display_confidence])
        return output.getvalue()
