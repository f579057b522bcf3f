# RFX Test Fixtures
# Pytest fixtures and a scripted git runner for rfx tests

import tempfile
from collections.abc import Generator, Sequence
from pathlib import Path
from typing import Any, Optional

import pytest

from rfx.errors import GitCommandError
from rfx.git.operations import GitRepository
from rfx.workflow import ChangeDecision, Workflow

# Argument vectors used by GitRepository, as tuples
CURRENT_BRANCH = ("rev-parse", "--abbrev-ref", "HEAD")
LIST_BRANCHES = ("for-each-ref", "--format=%(refname:short)", "refs/heads/")
LIST_REMOTES = ("remote", "-v")
LIST_REMOTE_BRANCHES = (
    "for-each-ref",
    "--format=%(refname:short)|%(authorname)|%(committerdate:short)",
    "refs/remotes/",
)
STATUS = ("status", "--porcelain=v1")
UPSTREAM = ("rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}")
STASH = ("stash", "push", "-u")
STASH_POP = ("stash", "pop")


def first_commit_args(branch: str) -> tuple[str, ...]:
    return ("log", "--reverse", "--format=%an|%ad", "--date=short", branch)


def last_commit_args(branch: str) -> tuple[str, ...]:
    return ("log", "-1", "--format=%ad|%s", "--date=short", branch)


def commits_args(branch: str, count: int) -> tuple[str, ...]:
    return ("log", f"-{count}", "--pretty=format:%h|%an|%ad|%s", "--date=short", branch)


def ahead_behind_args(upstream: str) -> tuple[str, ...]:
    return ("rev-list", "--left-right", "--count", f"HEAD...{upstream}")


def git_failure(*args: str, stderr: str = "fatal: error", returncode: int = 1, stdout: str = "") -> GitCommandError:
    return GitCommandError(list(args), returncode=returncode, stderr=stderr, stdout=stdout)


class FakeGitRunner:
    """
    GitRunner returning scripted responses.

    Each response is a string, an exception to raise, or a list of those
    consumed in order (the last entry repeats).
    """

    def __init__(self, responses: Optional[dict[tuple[str, ...], Any]] = None):
        self.responses: dict[tuple[str, ...], Any] = dict(responses or {})
        self.calls: list[tuple[str, ...]] = []
        self.raw_calls: list[tuple[str, ...]] = []

    def run(self, args: Sequence[str], *, raw: bool = False) -> str:
        key = tuple(args)
        self.calls.append(key)
        if raw:
            self.raw_calls.append(key)
        if key not in self.responses:
            raise AssertionError(f"unexpected git call: {key}")

        value = self.responses[key]
        if isinstance(value, list):
            value = value.pop(0) if len(value) > 1 else value[0]
        if isinstance(value, BaseException):
            raise value
        return value

    def called(self, *args: str) -> bool:
        return tuple(args) in self.calls


class ScriptedFlowHandler:
    """FlowHandler with canned answers."""

    def __init__(
        self,
        decisions: Sequence[ChangeDecision] = (),
        target: Optional[str] = "use-default",
        on_commit=None,
    ):
        self.decisions = list(decisions)
        self.target = target
        self.on_commit = on_commit
        self.seen_changes: list = []
        self.seen_candidates: list[str] = []
        self.seen_default: Optional[str] = None
        self.commits = 0

    def decide(self, changes):
        self.seen_changes.append(changes)
        return self.decisions.pop(0) if self.decisions else ChangeDecision.CANCEL

    def commit_changes(self, workflow):
        self.commits += 1
        if self.on_commit is not None:
            self.on_commit(workflow)

    def select_target(self, candidates, default):
        self.seen_candidates = list(candidates)
        self.seen_default = default
        if self.target == "use-default":
            return default
        return self.target


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture(autouse=True)
def isolated_config(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point RFX_CONFIG at a file that doesn't exist yet."""
    path = temp_dir / "config" / "rfx.yaml"
    monkeypatch.setenv("RFX_CONFIG", str(path))
    return path


@pytest.fixture
def fake_runner() -> FakeGitRunner:
    return FakeGitRunner()


@pytest.fixture
def repo(fake_runner: FakeGitRunner) -> GitRepository:
    return GitRepository(fake_runner)


@pytest.fixture
def workflow(repo: GitRepository) -> Workflow:
    return Workflow(repo)
