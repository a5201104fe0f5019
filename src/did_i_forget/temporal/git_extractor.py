"""Stream git history as commits of file paths."""

import os
from pathlib import Path
from typing import AbstractSet, Dict, Iterable, Iterator, List, Optional

from ..logging_config import get_logger
from .git import stream_git, unquote_path
from .lines import split_lines
from .models import Commit

logger = get_logger(__name__)


def log_command(branch: str) -> List[str]:
    """``git log`` arguments producing one blank-line separated path group per commit."""
    return [
        "log",
        "--all",
        "--name-only",
        "--pretty=format:",
        "--no-renames",
        "--no-merges",
        branch,
    ]


class PathFilter:
    """Keep a path if it exists on disk or belongs to the changed set.

    Changed paths always pass: a file deleted by the current change still
    counts toward coupling. Existence lookups are memoized for the run.
    """

    def __init__(self, changed: AbstractSet[str], repo_path: Optional[str] = None):
        self.root = Path(repo_path) if repo_path is not None else Path(".")
        self._exists: Dict[str, bool] = dict.fromkeys(changed, True)

    def __call__(self, path: str) -> bool:
        known = self._exists.get(path)
        if known is None:
            known = os.path.exists(self.root / path)
            self._exists[path] = known
        return known


def group_commits(lines: Iterable[str]) -> Iterator[Commit]:
    """Group path lines into commits.

    Consecutive non-empty lines form one commit and an empty line ends it.
    Empty groups are skipped; a last group with no trailing blank line is
    still yielded.
    """
    paths: List[str] = []
    for line in lines:
        if line:
            paths.append(line)
        elif paths:
            yield tuple(paths)
            paths = []
    if paths:
        yield tuple(paths)


class GitExtractor:
    """Produce the filtered, full-history commit stream of a repository."""

    def __init__(self, branch: str, changed: AbstractSet[str], repo_path: Optional[str] = None):
        self.branch = branch
        self.changed = changed
        self.repo_path = repo_path

    def extract_lines(self) -> Iterator[str]:
        """Filtered log lines, blank separators included.

        This is the exact line sequence the history cache stores.

        Raises:
            VcsInvocationError: git failed; raised when the stream ends
        """
        keep = PathFilter(self.changed, self.repo_path)
        lines = split_lines(stream_git(log_command(self.branch), self.repo_path))
        for line in lines:
            if not line:
                yield line
                continue
            path = unquote_path(line)
            if keep(path):
                yield path

    def iter_commits(self) -> Iterator[Commit]:
        return group_commits(self.extract_lines())
