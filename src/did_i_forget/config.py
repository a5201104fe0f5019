"""Configuration loading and management for did-i-forget.

Configuration sources are merged in priority order:
    1. Defaults (defined in CouplingConfig)
    2. Project config (./did-i-forget.toml, or [tool.did-i-forget] in ./pyproject.toml)
    3. Explicit config file
    4. Environment variables (DID_I_FORGET_* prefix)
    5. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(threshold=0.7, quiet=True)
    >>> config.threshold
    0.7
    >>> config.verbosity
    'quiet'
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]
OutputFormat = Literal["table", "csv"]
NormalizationMode = Literal["coupled", "changed"]

ENV_PREFIX = "DID_I_FORGET_"
PROJECT_CONFIG_NAME = "did-i-forget.toml"


@dataclass(frozen=True)
class CouplingConfig:
    """Settings consumed by the coupling pipeline.

    Attributes:
        Analysis:
            master: Reference branch the working tree is compared against
            threshold: Minimum confidence for a coupled file to be reported
            top_n: Maximum coupled files reported per changed file
            normalization: "coupled" divides shared commits by the coupled
                file's commit count, "changed" by the changed file's
            repo_path: Repository root; git runs here and paths resolve here

        Caching:
            cache: Cache the filtered commit log between runs
            cache_file: Path of the gzip cache (relative to repo_path)
            cache_tmp_dir: Directory for the temporary file written before
                the atomic rename (None = the cache file's directory)

        Output control:
            output_format: "table" or "csv"
            verbosity: Logging verbosity level
            progress_interval: Report progress every N commits
    """

    master: str = "origin/master"
    threshold: float = 0.5
    top_n: int = 1
    normalization: NormalizationMode = "coupled"
    repo_path: str = "."

    cache: bool = False
    cache_file: str = ".did-i-forget-cache"
    cache_tmp_dir: Optional[str] = None

    output_format: OutputFormat = "table"
    verbosity: Verbosity = "normal"
    progress_interval: int = 1000

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, (int, float)):
            raise InvalidConfigError("threshold", self.threshold, "must be a number")
        if not 0.0 <= self.threshold <= 1.0:
            raise InvalidConfigError("threshold", self.threshold, "must be between 0.0 and 1.0")

        if isinstance(self.top_n, bool) or not isinstance(self.top_n, int) or self.top_n < 1:
            raise InvalidConfigError("top_n", self.top_n, "must be a positive integer")

        if not isinstance(self.master, str) or not self.master.strip():
            raise InvalidConfigError("master", self.master, "branch name must not be empty")
        # A leading dash would be read by git as an option
        if self.master.startswith("-"):
            raise InvalidConfigError("master", self.master, "branch name must not start with '-'")

        if self.normalization not in ("coupled", "changed"):
            raise InvalidConfigError(
                "normalization", self.normalization, "must be 'coupled' or 'changed'"
            )
        if self.output_format not in ("table", "csv"):
            raise InvalidConfigError("output_format", self.output_format, "must be 'table' or 'csv'")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "must be 'quiet', 'normal' or 'verbose'"
            )

        if not self.cache_file:
            raise InvalidConfigError("cache_file", self.cache_file, "must not be empty")
        if self.progress_interval < 1:
            raise InvalidConfigError(
                "progress_interval", self.progress_interval, "must be at least 1"
            )

    @property
    def cache_path(self) -> Path:
        """Cache file location, anchored at the repository root."""
        path = Path(self.cache_file)
        if path.is_absolute():
            return path
        return Path(self.repo_path) / path

    @property
    def quiet(self) -> bool:
        return self.verbosity == "quiet"


def load_config(config_file: Optional[Path] = None, **overrides) -> CouplingConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated CouplingConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing, or a
            value fails validation
    """
    merged: dict = {}

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_config_file(project_config))
    else:
        pyproject = Path.cwd() / "pyproject.toml"
        if pyproject.exists():
            merged.update(_load_pyproject_table(pyproject))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_config_file(config_file))

    merged.update(_load_env_vars())

    # Verbosity boolean flags become the verbosity string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(CouplingConfig)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            details={"known": ", ".join(sorted(known))},
        )

    return CouplingConfig(**merged)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from DID_I_FORGET_* environment variables.

    Supported environment variables:
        DID_I_FORGET_MASTER: str
        DID_I_FORGET_THRESHOLD: float
        DID_I_FORGET_TOP_N: int
        DID_I_FORGET_CACHE: bool (true/false/1/0)
        DID_I_FORGET_CACHE_FILE: str
        DID_I_FORGET_NORMALIZATION: coupled/changed
        DID_I_FORGET_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any DID_I_FORGET_* vars found.
    """
    type_hints = get_type_hints(CouplingConfig)

    result: dict[str, Any] = {}

    for field_name in CouplingConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_config_file(path: Path) -> dict:
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
    return _normalize_keys(data)


def _load_pyproject_table(path: Path) -> dict:
    """Read the [tool.did-i-forget] table of a pyproject.toml, if any."""
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid pyproject file '{path}': {e}")
    table = data.get("tool", {}).get("did-i-forget", {})
    if not isinstance(table, dict):
        raise ConfigurationError(f"[tool.did-i-forget] in '{path}' must be a table")
    return _normalize_keys(table)


def _normalize_keys(data: dict) -> dict:
    """Accept TOML-style dashed keys (``top-n``) for dataclass fields."""
    return {key.replace("-", "_"): value for key, value in data.items()}


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
