"""Typed records produced from git output.

Every record is immutable and built fresh for a single command; nothing
here is cached or persisted.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


class RemoteDirection(str, Enum):
    """Direction column of `git remote -v`."""

    FETCH = "fetch"
    PUSH = "push"


@dataclass(frozen=True)
class BranchInfo:
    """Local branch with creation and last-change metadata."""

    name: str
    author: str
    time_created: str
    last_change: str
    last_commit: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CommitInfo:
    """Single commit from a log listing."""

    hash: str
    author: str
    date: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RemoteInfo:
    """One line of a remote listing.

    host, owner and repo are derived from the URL on a best-effort basis and
    are None for URLs that are neither HTTPS nor SSH shorthand.
    """

    name: str
    url: str
    direction: RemoteDirection
    host: Optional[str] = None
    owner: Optional[str] = None
    repo: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["direction"] = self.direction.value
        return data


@dataclass(frozen=True)
class FileChange:
    """Changed path with its verbatim porcelain status code.

    path is relative to the repository root, not the working directory.
    For renames and copies it is the new name and orig_path the old one.
    """

    status: str
    path: str
    orig_path: Optional[str] = None

    @property
    def is_untracked(self) -> bool:
        return self.status == "??"

    @property
    def display_path(self) -> str:
        if self.orig_path is None:
            return self.path
        return f"{self.orig_path} -> {self.path}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.status, "path": self.path}
        if self.orig_path is not None:
            data["orig_path"] = self.orig_path
        return data


@dataclass(frozen=True)
class StatusSummary:
    """Working tree status of the current branch.

    ahead and behind are both None when the branch tracks no upstream.
    """

    branch: str
    ahead: Optional[int] = None
    behind: Optional[int] = None
    changes: tuple[FileChange, ...] = field(default_factory=tuple)
    upstream: Optional[str] = None

    @property
    def has_upstream(self) -> bool:
        return self.ahead is not None and self.behind is not None

    @property
    def is_clean(self) -> bool:
        return not self.changes

    @property
    def up_to_date(self) -> bool:
        return self.ahead == 0 and self.behind == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "branch": self.branch,
            "upstream": self.upstream,
            "ahead": self.ahead,
            "behind": self.behind,
            "changes": [change.to_dict() for change in self.changes],
        }


@dataclass(frozen=True)
class RemoteBranchInfo:
    """Remote-tracking branch, e.g. full_name "origin/main", short_name "main"."""

    full_name: str
    short_name: str
    author: str
    date: str

    @property
    def remote(self) -> str:
        return self.full_name.split("/", 1)[0]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
