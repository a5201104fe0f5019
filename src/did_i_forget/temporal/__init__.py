"""Temporal analysis: git history, co-change counts and coupling reports."""

from .cache import HistoryCache
from .changes import get_changed_paths, resolve_fingerprint
from .cochange import analyze_coupling
from .git import unquote_path
from .git_extractor import GitExtractor, group_commits
from .lines import split_lines
from .models import Commit, CouplingRecord, CouplingStats, Normalization
from .report import generate_report

__all__ = [
    "Commit",
    "CouplingRecord",
    "CouplingStats",
    "GitExtractor",
    "HistoryCache",
    "Normalization",
    "analyze_coupling",
    "generate_report",
    "get_changed_paths",
    "group_commits",
    "resolve_fingerprint",
    "split_lines",
    "unquote_path",
]
