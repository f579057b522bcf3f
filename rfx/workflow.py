"""Workflow layer for rfx.

Composes GitRepository calls into the guided operations exposed by the
CLI and enforces the business rules around them: commit message and
branch name validation, and the uncommitted-change guard in front of
pull and push.

The workflow never prints or prompts. Interactive decisions during pull
and push are delegated to a FlowHandler supplied by the caller.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

from rfx.errors import GitCommandError, RfxError, ValidationError, format_error
from rfx.git.operations import GitRepository
from rfx.models import (
    BranchInfo,
    CommitInfo,
    FileChange,
    RemoteBranchInfo,
    RemoteInfo,
    StatusSummary,
)

MIN_COMMIT_MESSAGE_LENGTH = 3


class FlowState(str, Enum):
    """States of the guarded pull/push flow."""

    CHECKING_CHANGES = "checking_changes"
    USER_DECISION = "user_decision"
    SELECTING_TARGET = "selecting_target"
    EXECUTING = "executing"
    SUCCESS = "success"
    FAILURE = "failure"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (FlowState.SUCCESS, FlowState.FAILURE, FlowState.ABORTED)


class ChangeDecision(str, Enum):
    """What to do about uncommitted changes before pull/push."""

    COMMIT = "commit"
    STASH = "stash"
    CANCEL = "cancel"


class FlowHandler(Protocol):
    """Interactive collaborator for guarded flows."""

    def decide(self, changes: list[FileChange]) -> ChangeDecision:
        """Choose how to deal with uncommitted changes."""
        ...

    def commit_changes(self, workflow: Workflow) -> None:
        """Commit (some of) the pending changes using the workflow."""
        ...

    def select_target(self, candidates: list[str], default: Optional[str]) -> Optional[str]:
        """Pick a "remote/branch" target, or None to cancel."""
        ...


@dataclass
class FlowResult:
    """Outcome of a guarded pull or push."""

    state: FlowState
    target: Optional[str] = None
    output: str = ""
    error: Optional[RfxError] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state == FlowState.SUCCESS


def split_target(target: str) -> tuple[str, str]:
    """Split "origin/feature/x" into ("origin", "feature/x")."""
    remote, _, branch = target.partition("/")
    return remote, branch


class Workflow:
    """Guided git operations."""

    def __init__(
        self,
        repo: Optional[GitRepository] = None,
        *,
        min_message_length: int = MIN_COMMIT_MESSAGE_LENGTH,
        default_remote: str = "origin",
    ):
        self.repo = repo or GitRepository()
        self.min_message_length = min_message_length
        self.default_remote = default_remote

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def list_branches(self) -> list[BranchInfo]:
        return self.repo.branches()

    def list_remotes(self) -> list[RemoteInfo]:
        return self.repo.remotes()

    def list_remote_branches(self) -> list[RemoteBranchInfo]:
        return self.repo.remote_branches()

    def list_commits(self, branch: str, count: int) -> list[CommitInfo]:
        if count < 1:
            raise ValidationError("Commit count must be at least 1")
        return self.repo.commits(branch, count)

    def get_status(self) -> StatusSummary:
        """
        Summarize the current branch.

        A branch without an upstream reports ahead and behind as None.
        """
        branch = self.repo.current_branch()
        changes = tuple(self.repo.changes())
        upstream = self.repo.upstream()

        if upstream is None:
            return StatusSummary(branch=branch, changes=changes)

        ahead, behind = self.repo.ahead_behind(upstream)
        return StatusSummary(
            branch=branch,
            ahead=ahead,
            behind=behind,
            changes=changes,
            upstream=upstream,
        )

    def list_changes(self) -> list[FileChange]:
        return self.repo.changes()

    def change_summary(self) -> str:
        return self.repo.diff_stat()

    def fetch(self) -> str:
        return self.repo.fetch(all_remotes=True)

    # ------------------------------------------------------------------
    # Commits and branches
    # ------------------------------------------------------------------

    def stage_files(self, files: list[str]) -> None:
        self.repo.add(files)

    def stage_all(self) -> None:
        self.repo.add_all()

    def validate_commit_message(self, message: str) -> str:
        """
        Check a commit message.

        Returns:
            The trimmed message.

        Raises:
            ValidationError: If empty or shorter than the minimum length.
        """
        message = message.strip()
        if not message:
            raise ValidationError("Commit message cannot be empty")
        if len(message) < self.min_message_length:
            raise ValidationError(
                f"Commit message must be at least {self.min_message_length} characters"
            )
        return message

    def create_commit(self, message: str) -> str:
        """Validate and commit staged changes. Returns the short hash."""
        message = self.validate_commit_message(message)
        return self.repo.commit(message)

    def validate_branch_name(self, name: str) -> str:
        """
        Check a new branch name against local branches.

        Returns:
            The trimmed name.

        Raises:
            ValidationError: If empty, containing whitespace, or already taken.
        """
        name = name.strip()
        if not name:
            raise ValidationError("Branch name cannot be empty")
        if any(ch.isspace() for ch in name):
            raise ValidationError("Branch name cannot contain spaces")
        if name in self.repo.branch_names():
            raise ValidationError(f"Branch '{name}' already exists")
        return name

    def create_branch(self, name: str) -> str:
        """Validate, create and switch to a new branch. Returns its name."""
        name = self.validate_branch_name(name)
        self.repo.create_branch(name)
        return name

    def undo_last_commit(self) -> CommitInfo:
        """
        Soft-reset the most recent commit, keeping its changes.

        Returns:
            The commit that was undone.
        """
        commits = self.repo.commits("HEAD", 1)
        if not commits:
            raise ValidationError("No commits to undo")
        self.repo.reset_soft(1)
        return commits[0]

    def last_commit(self) -> Optional[CommitInfo]:
        try:
            commits = self.repo.commits("HEAD", 1)
        except GitCommandError:
            return None
        return commits[0] if commits else None

    # ------------------------------------------------------------------
    # Guarded network operations
    # ------------------------------------------------------------------

    def pull(self, handler: FlowHandler) -> FlowResult:
        """Pull a remote branch once the working tree is clean."""

        def targets() -> tuple[list[str], Optional[str]]:
            candidates = [branch.full_name for branch in self.repo.remote_branches()]
            if not candidates:
                raise ValidationError("No remote branches found. Run 'rfx fetch' first.")
            return candidates, self.repo.upstream()

        def execute(target: str) -> str:
            remote, branch = split_target(target)
            return self.repo.pull(remote, branch)

        return self._guarded(handler, targets, execute)

    def push(self, handler: FlowHandler) -> FlowResult:
        """Push the current branch once the working tree is clean."""
        upstream: Optional[str] = None

        def targets() -> tuple[list[str], Optional[str]]:
            nonlocal upstream
            branch = self.repo.current_branch()
            names = self.repo.remote_names()
            if not names:
                raise ValidationError("No remotes configured")
            upstream = self.repo.upstream()
            candidates = [f"{name}/{branch}" for name in names]
            if upstream is not None:
                default = upstream
            elif self.default_remote in names:
                default = f"{self.default_remote}/{branch}"
            else:
                default = candidates[0]
            return candidates, default

        def execute(target: str) -> str:
            remote, branch = split_target(target)
            return self.repo.push(remote, branch, set_upstream=upstream is None)

        return self._guarded(handler, targets, execute)

    def _guarded(
        self,
        handler: FlowHandler,
        targets: Callable[[], tuple[list[str], Optional[str]]],
        execute: Callable[[str], str],
    ) -> FlowResult:
        state = FlowState.CHECKING_CHANGES
        result = FlowResult(state=state)
        changes: list[FileChange] = []
        candidates: list[str] = []
        default: Optional[str] = None
        stashed = False

        try:
            while not state.is_terminal:
                try:
                    if state == FlowState.CHECKING_CHANGES:
                        changes = self.repo.changes()
                        state = FlowState.USER_DECISION if changes else FlowState.SELECTING_TARGET

                    elif state == FlowState.USER_DECISION:
                        decision = handler.decide(changes)
                        if decision == ChangeDecision.CANCEL:
                            state = FlowState.ABORTED
                        else:
                            if decision == ChangeDecision.STASH:
                                self.repo.stash()
                                stashed = True
                            else:
                                handler.commit_changes(self)
                            state = FlowState.CHECKING_CHANGES

                    elif state == FlowState.SELECTING_TARGET:
                        candidates, default = targets()
                        result.target = handler.select_target(candidates, default)
                        state = FlowState.EXECUTING if result.target else FlowState.ABORTED

                    elif state == FlowState.EXECUTING:
                        result.output = execute(result.target or "")
                        state = FlowState.SUCCESS

                except RfxError as e:
                    result.error = e
                    state = FlowState.FAILURE
        finally:
            # Stashed changes go back even when the flow failed or was aborted.
            if stashed:
                try:
                    self.repo.stash_pop()
                except RfxError as e:
                    result.warnings.append(
                        f"Could not restore stashed changes ({format_error(e)}). Run 'git stash pop' manually."
                    )

        result.state = state
        return result
