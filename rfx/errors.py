# RFX Errors
# Exception hierarchy and user-facing error formatting

from enum import Enum
from typing import Optional, Sequence


class ErrorKind(str, Enum):
    """Closed set of failure categories."""

    SPAWN_FAILURE = "spawn_failure"
    TOOL_FAILURE = "tool_failure"
    VALIDATION_FAILURE = "validation_failure"


class RfxError(Exception):
    """Base class for all rfx errors."""

    kind: ErrorKind

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class GitSpawnError(RfxError):
    """Raised when the git executable could not be launched."""

    kind = ErrorKind.SPAWN_FAILURE


class GitCommandError(RfxError):
    """Raised when git exits with a non-zero status."""

    kind = ErrorKind.TOOL_FAILURE

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = "", stdout: str = ""):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
        # Some failures (merge conflicts) are only described on stdout.
        self.stdout = stdout
        super().__init__(f"Git command failed: git {' '.join(self.args_list)}")

    @property
    def details(self) -> str:
        """Captured stderr and stdout, for hint matching."""
        return "\n".join(part for part in (self.stderr, self.stdout) if part)


class ValidationError(RfxError):
    """Raised when user input breaks a business rule."""

    kind = ErrorKind.VALIDATION_FAILURE

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


# Substring -> hint. Checked in order, first match wins.
_HINTS: list[tuple[str, str]] = [
    (
        "rejected",
        "The remote has commits you don't have yet. Run 'rfx pull' first, then push again.",
    ),
    (
        "conflict",
        "Merge conflict detected. Resolve the conflicting files, commit them, and retry.",
    ),
    (
        "could not read from remote",
        "Could not reach the remote. Check your network connection and repository access rights.",
    ),
]


def friendly_hint(stderr: str) -> Optional[str]:
    """
    Return a guidance message for well-known git failures.

    Matching is case-insensitive and purely cosmetic.

    Args:
        stderr: Captured git standard error.

    Returns:
        Hint text, or None if nothing matched.
    """
    lowered = stderr.lower()
    for needle, hint in _HINTS:
        if needle in lowered:
            return hint
    return None


def format_error(error: RfxError) -> str:
    """
    Format an error for display.

    Tool failures show git's own stderr when present, otherwise its
    stdout, since that is what users can act on.
    """
    if isinstance(error, GitCommandError):
        detail = error.stderr.strip() or error.stdout.strip()
        return detail if detail else f"{error.message} (exit code {error.returncode})"
    return error.message


class UserCancelled(Exception):
    """Raised when the user dismisses or interrupts a prompt.

    Not an RfxError: cancelling is a normal way to end a command.
    """
