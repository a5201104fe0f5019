"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import CouplingConfig, load_config

# Report goes to stdout; status and errors to stderr
console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    path: Optional[Path] = None,
    **overrides,
) -> CouplingConfig:
    """Build configuration from CLI options; unset options keep file/env values."""
    if path is not None:
        overrides["repo_path"] = str(path)
    return load_config(config_file=config, **overrides)
