"""History cache exceptions. Never fatal; the cache layer degrades to a miss."""

from pathlib import Path

from .base import DidIForgetError


class CacheError(DidIForgetError):
    """Base class for history cache errors."""

    pass


class CacheReadError(CacheError):
    """Raised when a cache file exists but cannot be decompressed or parsed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot read history cache: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class CacheWriteError(CacheError):
    """Raised when the temporary cache file cannot be written or published."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot write history cache: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
