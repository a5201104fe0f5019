"""Run git as a subprocess, one-shot or streaming."""

import subprocess
import tempfile
from pathlib import Path
from typing import Iterator, List, Optional

from ..exceptions import VcsInvocationError
from ..logging_config import get_logger

logger = get_logger(__name__)

# Read size for streamed stdout
_CHUNK_SIZE = 64 * 1024


def _command(args: List[str], repo_path: Optional[str]) -> List[str]:
    # Non-ASCII bytes come through raw; only ", \ and control characters stay quoted
    cmd = ["git", "-c", "core.quotePath=false"]
    if repo_path is not None:
        cmd += ["-C", str(Path(repo_path))]
    return cmd + list(args)


_ESCAPES = {
    ord("a"): 0x07,
    ord("b"): 0x08,
    ord("t"): 0x09,
    ord("n"): 0x0A,
    ord("v"): 0x0B,
    ord("f"): 0x0C,
    ord("r"): 0x0D,
    ord('"'): 0x22,
    ord("\\"): 0x5C,
}


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of a path.

    git wraps a path in double quotes and backslash-escapes it when the path
    contains ``"``, ``\\`` or control characters. Unquoted paths are returned
    unchanged. Octal escapes are raw bytes, so the result is decoded with
    surrogateescape like the rest of the git output.
    """
    if len(path) < 2 or path[0] != '"' or path[-1] != '"':
        return path

    raw = path[1:-1].encode("utf-8", "surrogateescape")
    out = bytearray()
    i = 0
    while i < len(raw):
        byte = raw[i]
        if byte != 0x5C or i + 1 == len(raw):
            out.append(byte)
            i += 1
            continue
        nxt = raw[i + 1]
        octal = raw[i + 1 : i + 4]
        if len(octal) == 3 and all(0x30 <= b <= 0x37 for b in octal):
            out.append(int(octal, 8) & 0xFF)
            i += 4
        elif nxt in _ESCAPES:
            out.append(_ESCAPES[nxt])
            i += 2
        else:
            out += raw[i : i + 2]
            i += 2
    return out.decode("utf-8", "surrogateescape")


def run_git(args: List[str], repo_path: Optional[str] = None) -> str:
    """Run a git command to completion and return its stdout.

    Raises:
        VcsInvocationError: git could not be started or exited non-zero
    """
    cmd = _command(args, repo_path)
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True)
    except OSError as e:
        raise VcsInvocationError(cmd, str(e)) from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", "replace").strip()
        raise VcsInvocationError(cmd, stderr or "non-zero exit status", result.returncode)
    return result.stdout.decode("utf-8", "surrogateescape")


def stream_git(args: List[str], repo_path: Optional[str] = None) -> Iterator[bytes]:
    """Yield stdout of a git command in raw chunks as it is produced.

    The exit status is checked once stdout is exhausted, so a failing
    command raises instead of looking like a short history. stderr goes to
    an anonymous file rather than a pipe; a full stderr pipe would stall git
    while we block on stdout.

    If the consumer stops early the process is killed and reaped.

    Raises:
        VcsInvocationError: git could not be started or exited non-zero
    """
    cmd = _command(args, repo_path)
    logger.debug("Streaming %s", " ".join(cmd))

    with tempfile.TemporaryFile() as stderr_file:
        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=stderr_file,
            )
        except OSError as e:
            raise VcsInvocationError(cmd, str(e)) from e

        try:
            stdout = proc.stdout
            assert stdout is not None
            while True:
                chunk = stdout.read(_CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
            returncode = proc.wait()
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.wait()
            if proc.stdout:
                proc.stdout.close()

        if returncode != 0:
            stderr_file.seek(0)
            stderr = stderr_file.read().decode("utf-8", "replace").strip()
            raise VcsInvocationError(cmd, stderr or "non-zero exit status", returncode)
