"""rfx - a beginner-friendly command-line front end for git.

Wraps the git CLI with a guided workflow (status, commit, branch, pull,
push, undo), parsing git's output into typed records and adding safety
checks before anything touches a remote.
"""

__version__ = "0.3.0"

__all__ = [
    "__version__",
    "Workflow",
    "GitRepository",
    "BranchInfo",
    "CommitInfo",
    "RemoteInfo",
    "FileChange",
    "StatusSummary",
    "RemoteBranchInfo",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name == "Workflow":
        from rfx.workflow import Workflow

        return Workflow
    if name == "GitRepository":
        from rfx.git.operations import GitRepository

        return GitRepository
    if name in ("BranchInfo", "CommitInfo", "RemoteInfo", "FileChange", "StatusSummary", "RemoteBranchInfo"):
        from rfx import models

        return getattr(models, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
