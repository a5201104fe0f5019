"""Version-control exceptions: git could not be started or failed."""

from typing import Optional, Sequence

from .base import DidIForgetError


class VcsInvocationError(DidIForgetError):
    """Raised when a git command fails to start or exits with a non-zero status.

    Always fatal for the run: no partial report is produced.
    """

    def __init__(self, command: Sequence[str], reason: str, returncode: Optional[int] = None):
        details = {"command": " ".join(command), "reason": reason}
        if returncode is not None:
            details["returncode"] = str(returncode)

        super().__init__(f"git invocation failed: {' '.join(command)}", details=details)
        self.command = list(command)
        self.reason = reason
        self.returncode = returncode
