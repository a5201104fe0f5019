"""Resolve the changed-path set and the reference fingerprint."""

from typing import FrozenSet, Optional

from ..logging_config import get_logger
from .git import run_git, unquote_path

logger = get_logger(__name__)


def _name_only(output: str) -> set:
    return {unquote_path(line) for line in output.split("\n") if line}


def get_changed_paths(branch: str, repo_path: Optional[str] = None) -> FrozenSet[str]:
    """Paths that differ from *branch*, plus uncommitted changes.

    Combines ``git diff --name-only <branch>...`` (changes on this branch
    since it forked from *branch*) with ``git diff --name-only HEAD``
    (local edits not yet committed).

    Raises:
        VcsInvocationError: either git command failed; no partial result
    """
    logger.info("Getting changed paths...")
    against_branch = _name_only(run_git(["diff", "--name-only", f"{branch}..."], repo_path))
    uncommitted = _name_only(run_git(["diff", "--name-only", "HEAD"], repo_path))

    changed = frozenset(against_branch | uncommitted)
    logger.info("%d files changed against %s", len(changed), branch)
    return changed


def resolve_fingerprint(branch: str, repo_path: Optional[str] = None) -> str:
    """Resolved revision of *branch*; identifies the history a cache was built from."""
    return run_git(["rev-parse", branch], repo_path).strip()
