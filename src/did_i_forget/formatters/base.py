"""Base formatter interface for coupling report rendering."""

from abc import ABC, abstractmethod
from typing import List

from ..temporal.models import CouplingRecord

HEADER = ["Changed file", "Top coupled file", "Shared commits", "Confidence"]


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, records: List[CouplingRecord]) -> None:
        """Write the report to stdout."""

    @abstractmethod
    def format(self, records: List[CouplingRecord]) -> str:
        """Return formatted string representation of the report."""
