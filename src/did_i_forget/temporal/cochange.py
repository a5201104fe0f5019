"""Accumulate co-change counts from a commit stream."""

import logging
from collections import defaultdict
from typing import AbstractSet, Callable, Iterable, Optional

from ..logging_config import get_logger
from .models import Commit, CouplingStats

ProgressCallback = Callable[[int], None]

DEFAULT_PROGRESS_INTERVAL = 1000


def analyze_coupling(
    commits: Iterable[Commit],
    changed: AbstractSet[str],
    progress: Optional[ProgressCallback] = None,
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
    logger: Optional[logging.Logger] = None,
) -> CouplingStats:
    """Count commits per path and co-changes between changed and other paths.

    Consumes *commits* once. For each commit:
    - every path's commit count goes up by one, changed or not
    - each (changed path, other path) pair in the commit is counted once

    Two changed paths in the same commit are never paired, so no changed
    path shows up as a coupling candidate.

    *progress* is called with the number of commits processed every
    *progress_interval* commits and once at the end.
    """
    log = logger or get_logger(__name__)

    commit_count: dict[str, int] = defaultdict(int)
    # Seeded in sorted order so report order does not depend on set iteration
    cooccurrence: dict[str, dict[str, int]] = {path: {} for path in sorted(changed)}

    processed = 0
    for commit in commits:
        paths = dict.fromkeys(commit)
        changed_in_commit = [p for p in paths if p in changed]
        others = [p for p in paths if p not in changed]

        for path in paths:
            commit_count[path] += 1

        for changed_path in changed_in_commit:
            coupled = cooccurrence[changed_path]
            for other in others:
                coupled[other] = coupled.get(other, 0) + 1

        processed += 1
        if processed % progress_interval == 0:
            log.debug("Processed %d commits...", processed)
            if progress is not None:
                progress(processed)

    if progress is not None:
        progress(processed)
    log.info("Processed %d commits", processed)

    return CouplingStats(
        commit_count=dict(commit_count),
        cooccurrence=cooccurrence,
        total_commits=processed,
    )
