"""Data models for co-change coupling analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

# Commits are plain tuples of repository-relative paths; hashes are not kept.
Commit = Tuple[str, ...]


class Normalization(str, Enum):
    """Denominator used when turning shared commits into a confidence."""

    COUPLED = "coupled"  # coupled file's own commit count
    CHANGED = "changed"  # changed file's commit count


@dataclass
class CouplingStats:
    commit_count: dict[str, int] = field(default_factory=dict)  # path -> commits touching it
    cooccurrence: dict[str, dict[str, int]] = field(default_factory=dict)  # changed -> other -> n
    total_commits: int = 0


@dataclass(frozen=True)
class CouplingRecord:
    path: str  # changed file
    coupled_path: str
    shared_commits: int
    total_commits: int  # normalizing denominator
    confidence: float  # shared_commits / total_commits, unrounded

    @property
    def display_confidence(self) -> float:
        return round(self.confidence, 2)
