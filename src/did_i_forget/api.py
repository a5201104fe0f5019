"""Public API for did-i-forget.

Example:
    >>> from did_i_forget import analyze
    >>>
    >>> records = analyze(master="origin/main", threshold=0.6)
    >>> for r in records:
    ...     print(r.path, r.coupled_path, r.display_confidence)
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .config import CouplingConfig, load_config
from .logging_config import get_logger
from .temporal import (
    CouplingRecord,
    GitExtractor,
    HistoryCache,
    analyze_coupling,
    generate_report,
    get_changed_paths,
    group_commits,
    resolve_fingerprint,
)
from .temporal.cochange import ProgressCallback

logger = get_logger(__name__)


def run(config: CouplingConfig, progress: Optional[ProgressCallback] = None) -> List[CouplingRecord]:
    """Run the coupling pipeline for a validated configuration.

    changed paths -> filtered git log -> (cache) -> co-change counts -> report

    Raises:
        VcsInvocationError: a git command failed; no report is produced
    """
    repo_path = config.repo_path
    changed = get_changed_paths(config.master, repo_path)

    extractor = GitExtractor(config.master, changed, repo_path)
    lines = extractor.extract_lines()
    if config.cache:
        fingerprint = resolve_fingerprint(config.master, repo_path)
        cache = HistoryCache(config.cache_path, fingerprint, tmp_dir=config.cache_tmp_dir)
        lines = cache.lines(lines)

    stats = analyze_coupling(
        group_commits(lines),
        changed,
        progress=progress,
        progress_interval=config.progress_interval,
    )

    logger.info("Generating report...")
    return generate_report(
        stats,
        threshold=config.threshold,
        top_n=config.top_n,
        normalization=config.normalization,
    )


def analyze(
    config_file: Optional[Path] = None,
    **overrides,
) -> List[CouplingRecord]:
    """Find files usually changed together with the current changes.

    Args:
        config_file: Optional explicit config file path
        **overrides: Configuration overrides (e.g., master="origin/main", top_n=3)

    Returns:
        Coupling records, grouped by changed file, best candidate first

    Raises:
        ConfigurationError: If configuration is invalid (before git runs)
        VcsInvocationError: If a git command fails
    """
    config = load_config(config_file=config_file, **overrides)
    return run(config)
