# RFX Git Operations
# Repository queries and commands built on an injected GitRunner

from typing import Optional, Sequence

from rfx.errors import GitCommandError
from rfx.git import parsing
from rfx.git.runner import GitRunner, SubprocessGitRunner
from rfx.models import (
    BranchInfo,
    CommitInfo,
    FileChange,
    RemoteBranchInfo,
    RemoteInfo,
)

# Format strings are part of the parsing contract; keep them in sync with rfx.git.parsing.
FIRST_COMMIT_FORMAT = "--format=%an|%ad"
LAST_COMMIT_FORMAT = "--format=%ad|%s"
COMMIT_FORMAT = "--pretty=format:%h|%an|%ad|%s"
REMOTE_BRANCH_FORMAT = "--format=%(refname:short)|%(authorname)|%(committerdate:short)"
DATE_SHORT = "--date=short"

# Pathspec magic: relative to the repository root, no glob expansion
TOP_LITERAL_PATHSPEC = ":(top,literal)"


class GitRepository:
    """
    Git operations for the repository in the runner's working directory.

    Each method maps to one (or a few) git invocations and returns
    parsed records. GitCommandError and GitSpawnError propagate unless a
    method documents that it degrades.
    """

    def __init__(self, runner: Optional[GitRunner] = None):
        self.runner = runner or SubprocessGitRunner()

    def _git(self, *args: str, raw: bool = False) -> str:
        return self.runner.run(list(args), raw=raw)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_branch(self) -> str:
        """Name of the checked-out branch ("HEAD" when detached)."""
        return self._git("rev-parse", "--abbrev-ref", "HEAD")

    def branch_names(self) -> list[str]:
        output = self._git("for-each-ref", "--format=%(refname:short)", "refs/heads/")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def first_commit(self, branch: str) -> tuple[str, str]:
        """
        Author and date of the oldest commit reachable from branch.

        Returns ("Unknown", "Unknown") if the query fails.
        """
        try:
            output = self._git("log", "--reverse", FIRST_COMMIT_FORMAT, DATE_SHORT, branch)
        except GitCommandError:
            return parsing.UNKNOWN, parsing.UNKNOWN
        lines = output.splitlines()
        return parsing.parse_first_commit(lines[0] if lines else "")

    def last_commit(self, branch: str) -> tuple[str, str]:
        """
        Date and subject of the newest commit on branch.

        Returns ("Unknown", "No commit") if the query fails.
        """
        try:
            output = self._git("log", "-1", LAST_COMMIT_FORMAT, DATE_SHORT, branch)
        except GitCommandError:
            return parsing.UNKNOWN, parsing.NO_COMMIT
        lines = output.splitlines()
        return parsing.parse_last_commit(lines[0] if lines else "")

    def branches(self) -> list[BranchInfo]:
        """List local branches with creator and last-change metadata."""
        result = []
        for name in self.branch_names():
            author, created = self.first_commit(name)
            changed, subject = self.last_commit(name)
            result.append(
                BranchInfo(
                    name=name,
                    author=author,
                    time_created=created,
                    last_change=changed,
                    last_commit=subject,
                )
            )
        return result

    def remotes(self) -> list[RemoteInfo]:
        return parsing.parse_remotes(self._git("remote", "-v"))

    def remote_names(self) -> list[str]:
        """Distinct remote names in listing order."""
        names: list[str] = []
        for remote in self.remotes():
            if remote.name not in names:
                names.append(remote.name)
        return names

    def remote_branches(self) -> list[RemoteBranchInfo]:
        output = self._git("for-each-ref", REMOTE_BRANCH_FORMAT, "refs/remotes/")
        return parsing.parse_remote_branches(output)

    def commits(self, branch: str, count: int) -> list[CommitInfo]:
        """Last `count` commits on branch, newest first."""
        output = self._git("log", f"-{count}", COMMIT_FORMAT, DATE_SHORT, branch)
        return parsing.parse_commits(output)

    def changes(self) -> list[FileChange]:
        # Raw output: the status columns are positional.
        return parsing.parse_status(self._git("status", "--porcelain=v1", raw=True))

    def has_uncommitted_changes(self) -> bool:
        return bool(self.changes())

    def upstream(self) -> Optional[str]:
        """Upstream of the current branch, or None if not tracking one."""
        try:
            name = self._git("rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}")
        except GitCommandError:
            return None
        return name or None

    def ahead_behind(self, upstream: str) -> tuple[int, int]:
        output = self._git("rev-list", "--left-right", "--count", f"HEAD...{upstream}")
        return parsing.parse_ahead_behind(output)

    def diff_stat(self) -> str:
        return self._git("diff", "--stat")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add(self, files: Sequence[str]) -> None:
        """
        Stage paths as reported by status.

        Status paths are relative to the repository root, so each one is
        anchored there and matched literally, whatever the working directory.
        """
        if not files:
            return
        self._git("add", "--", *(f"{TOP_LITERAL_PATHSPEC}{path}" for path in files))

    def add_all(self) -> None:
        self._git("add", "-A")

    def commit(self, message: str) -> str:
        """
        Create a commit.

        Returns:
            Abbreviated hash of the new commit.
        """
        self._git("commit", "-m", message)
        return self._git("rev-parse", "--short", "HEAD")

    def create_branch(self, name: str) -> str:
        return self._git("checkout", "-b", name)

    def fetch(self, *, all_remotes: bool = False) -> str:
        args = ["fetch"]
        if all_remotes:
            args.append("--all")
        return self._git(*args)

    def pull(self, remote: Optional[str] = None, branch: Optional[str] = None) -> str:
        args = ["pull"]
        if remote:
            args.append(remote)
            if branch:
                args.append(branch)
        return self._git(*args)

    def push(
        self,
        remote: Optional[str] = None,
        branch: Optional[str] = None,
        *,
        set_upstream: bool = False,
    ) -> str:
        args = ["push"]
        if set_upstream:
            args.append("-u")
        if remote:
            args.append(remote)
            if branch:
                args.append(branch)
        return self._git(*args)

    def reset_soft(self, count: int = 1) -> str:
        return self._git("reset", "--soft", f"HEAD~{count}")

    def stash(self) -> str:
        return self._git("stash", "push", "-u")

    def stash_pop(self) -> str:
        return self._git("stash", "pop")
