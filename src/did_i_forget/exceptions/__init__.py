"""Exception hierarchy for did-i-forget."""

from .base import DidIForgetError
from .cache import CacheError, CacheReadError, CacheWriteError
from .config import ConfigurationError, InvalidConfigError
from .vcs import VcsInvocationError

__all__ = [
    "DidIForgetError",
    "VcsInvocationError",
    "CacheError",
    "CacheReadError",
    "CacheWriteError",
    "ConfigurationError",
    "InvalidConfigError",
]
