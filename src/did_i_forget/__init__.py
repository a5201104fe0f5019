"""
did-i-forget - co-change coupling warnings from git history

Given the files changed on the current branch, scans the whole commit
history and reports other files that were historically committed together
with them, so a reviewer can spot the companion change that was forgotten.
"""

__version__ = "0.2.0"

from .api import analyze, run
from .config import CouplingConfig, load_config
from .temporal import CouplingRecord, Normalization

__all__ = [
    "analyze",  # Main entry point
    "run",
    "CouplingConfig",
    "CouplingRecord",
    "Normalization",
    "load_config",
]
