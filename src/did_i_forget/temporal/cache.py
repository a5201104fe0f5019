"""Gzip cache of the filtered commit log.

The cache replays the exact line stream the git extractor produced on an
earlier run. Layout (gzip-compressed text)::

    <resolved revision of the reference branch>
    path/one
    path/two
    <blank line ends the commit>
    ...

A cache is reused only when its first line equals the current fingerprint;
otherwise it is regenerated in full while the fresh history streams through.
Writes go to a temporary file that is renamed over the cache only after the
history was read to the end, so readers never see a half-written cache.
"""

from __future__ import annotations

import contextlib
import gzip
import logging
import os
import tempfile
import zlib
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional

from ..exceptions import CacheReadError, CacheWriteError
from ..logging_config import get_logger
from .lines import split_lines

ENCODING = "utf-8"
ERRORS = "surrogateescape"
TMP_PREFIX = "did-i-forget-cache-"

_CHUNK_SIZE = 64 * 1024
# A resolved revision is a hex hash; anything longer cannot match.
_MAX_FINGERPRINT_BYTES = 1024


class _CacheWriter:
    """One in-flight cache write: a temp file published by atomic rename."""

    def __init__(self, target: Path, fingerprint: str, tmp_dir: Path):
        self.target = target
        try:
            self._raw: IO[bytes] = tempfile.NamedTemporaryFile(
                prefix=TMP_PREFIX, dir=str(tmp_dir), delete=False
            )
        except OSError as e:
            raise CacheWriteError(target, f"cannot create temporary file: {e}") from e
        self.tmp_path = Path(self._raw.name)
        self._gz = gzip.GzipFile(fileobj=self._raw, mode="wb")
        self.write(fingerprint)

    def write(self, line: str) -> None:
        try:
            self._gz.write(line.encode(ENCODING, ERRORS))
            self._gz.write(b"\n")
        except OSError as e:
            self.discard()
            raise CacheWriteError(self.target, str(e)) from e

    def commit(self) -> None:
        try:
            self._gz.close()
            self._raw.close()
            os.replace(self.tmp_path, self.target)
        except OSError as e:
            self.discard()
            raise CacheWriteError(self.target, str(e)) from e

    def discard(self) -> None:
        with contextlib.suppress(OSError):
            self._gz.close()
        with contextlib.suppress(OSError):
            self._raw.close()
        with contextlib.suppress(FileNotFoundError):
            self.tmp_path.unlink()


class HistoryCache:
    """Fingerprint-validated cache in front of the commit log stream.

    Usage:
        cache = HistoryCache(".did-i-forget-cache", resolve_fingerprint("origin/master"))
        lines = cache.lines(extractor.extract_lines())
        commits = group_commits(lines)
    """

    def __init__(
        self,
        cache_file: str | Path,
        fingerprint: str,
        tmp_dir: Optional[str | Path] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.cache_file = Path(cache_file)
        self.fingerprint = fingerprint
        self.tmp_dir = Path(tmp_dir) if tmp_dir is not None else self.cache_file.parent
        self.logger = logger or get_logger(__name__)

    def lines(self, source: Iterable[str]) -> Iterator[str]:
        """Cached lines on a hit, else *source* teed into a fresh cache.

        *source* should be lazy: on a hit it is never iterated, so git is
        never started.
        """
        try:
            cached = self._open_valid()
        except CacheReadError as e:
            self.logger.warning("%s; rebuilding from git", e)
            cached = None

        if cached is not None:
            self.logger.info("History cache is valid, replaying %s", self.cache_file)
            return self._replay(cached)

        self.logger.info("History cache is stale or missing, reading git log")
        return self.write_through(source)

    def write_through(self, source: Iterable[str]) -> Iterator[str]:
        """Yield *source* unchanged while writing it to a new cache.

        The cache is published only if *source* is exhausted. A failed write
        is logged and streaming carries on uncached, leaving any existing
        cache untouched. Upstream errors propagate after the temp file is
        removed.
        """
        try:
            writer: Optional[_CacheWriter] = _CacheWriter(
                self.cache_file, self.fingerprint, self.tmp_dir
            )
        except CacheWriteError as e:
            self.logger.warning("%s", e)
            writer = None

        completed = False
        try:
            for line in source:
                if writer is not None:
                    try:
                        writer.write(line)
                    except CacheWriteError as e:
                        self.logger.warning("%s", e)
                        writer = None
                yield line
            completed = True
        finally:
            if writer is not None:
                if completed:
                    try:
                        writer.commit()
                        self.logger.debug("Wrote history cache %s", self.cache_file)
                    except CacheWriteError as e:
                        self.logger.warning("%s", e)
                else:
                    writer.discard()

    def is_valid(self) -> bool:
        """Whether the cache file exists, is intact and matches the fingerprint."""
        try:
            cached = self._open_valid()
        except CacheReadError:
            return False
        if cached is None:
            return False
        cached.close()
        return True

    def stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with path, size, stored fingerprint and validity
        """
        if not self.cache_file.exists():
            return {"path": str(self.cache_file), "exists": False}

        result = {
            "path": str(self.cache_file),
            "exists": True,
            "size": self.cache_file.stat().st_size,
        }
        try:
            with gzip.open(self.cache_file, "rb") as f:
                result["fingerprint"] = self._read_fingerprint(f)
        except (OSError, EOFError, zlib.error) as e:
            result["error"] = str(e) or type(e).__name__
        result["valid"] = self.is_valid()
        return result

    def invalidate(self) -> None:
        """Remove the cache file if present."""
        with contextlib.suppress(FileNotFoundError):
            self.cache_file.unlink()
            self.logger.info("Removed history cache %s", self.cache_file)

    def _open_valid(self) -> Optional[gzip.GzipFile]:
        """Open the cache positioned after its fingerprint line.

        The whole file is decompressed once first so the gzip checksum is
        verified before any line is handed downstream.

        Returns:
            The open file, or None when absent or stale

        Raises:
            CacheReadError: file exists but is unreadable or corrupt
        """
        if not self.cache_file.exists():
            return None

        try:
            f = gzip.open(self.cache_file, "rb")
        except OSError as e:
            raise CacheReadError(self.cache_file, str(e)) from e

        try:
            if self._read_fingerprint(f) != self.fingerprint:
                f.close()
                return None
            while f.read(_CHUNK_SIZE):
                pass
            f.seek(0)
            self._read_fingerprint(f)
        except (OSError, EOFError, zlib.error) as e:
            f.close()
            raise CacheReadError(self.cache_file, str(e) or type(e).__name__) from e
        return f

    @staticmethod
    def _read_fingerprint(f: gzip.GzipFile) -> str:
        line = f.readline(_MAX_FINGERPRINT_BYTES)
        if line.endswith(b"\n"):
            line = line[:-1]
        return line.decode(ENCODING, ERRORS)

    @staticmethod
    def _replay(f: gzip.GzipFile) -> Iterator[str]:
        with f:
            yield from split_lines(iter(lambda: f.read(_CHUNK_SIZE), b""), ENCODING, ERRORS)
