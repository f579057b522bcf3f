# Tests for rfx.git.operations
# Repository queries and commands against scripted and real git

import shutil
import subprocess
from pathlib import Path

import pytest

from rfx.errors import GitCommandError
from rfx.git.operations import GitRepository
from rfx.git.runner import SubprocessGitRunner
from rfx.models import FileChange
from rfx.workflow import Workflow

from tests.conftest import (
    CURRENT_BRANCH,
    LIST_BRANCHES,
    LIST_REMOTE_BRANCHES,
    LIST_REMOTES,
    STATUS,
    UPSTREAM,
    ahead_behind_args,
    commits_args,
    first_commit_args,
    git_failure,
    last_commit_args,
)


class TestBranches:
    """Tests for branch listing with metadata."""

    def test_branch_metadata(self, fake_runner, repo):
        fake_runner.responses.update(
            {
                LIST_BRANCHES: "main\nfeature",
                first_commit_args("main"): "Alice|2024-01-01\nBob|2024-02-01",
                last_commit_args("main"): "2024-03-01|Release",
                first_commit_args("feature"): "Alice|2024-01-01",
                last_commit_args("feature"): "2024-03-05|WIP login",
            }
        )
        branches = repo.branches()
        assert [b.name for b in branches] == ["main", "feature"]
        assert branches[0].author == "Alice"
        assert branches[0].time_created == "2024-01-01"
        assert branches[0].last_change == "2024-03-01"
        assert branches[1].last_commit == "WIP login"

    def test_failed_metadata_degrades(self, fake_runner, repo):
        fake_runner.responses.update(
            {
                LIST_BRANCHES: "orphan",
                first_commit_args("orphan"): git_failure("log"),
                last_commit_args("orphan"): git_failure("log"),
            }
        )
        (branch,) = repo.branches()
        assert branch.author == "Unknown"
        assert branch.time_created == "Unknown"
        assert branch.last_change == "Unknown"
        assert branch.last_commit == "No commit"

    def test_listing_failure_propagates(self, fake_runner, repo):
        fake_runner.responses[LIST_BRANCHES] = git_failure("for-each-ref", stderr="fatal: not a git repository")
        with pytest.raises(GitCommandError):
            repo.branches()

    def test_empty_log_uses_sentinels(self, fake_runner, repo):
        fake_runner.responses.update(
            {
                LIST_BRANCHES: "empty",
                first_commit_args("empty"): "",
                last_commit_args("empty"): "",
            }
        )
        (branch,) = repo.branches()
        assert (branch.author, branch.last_commit) == ("Unknown", "No commit")


class TestRemotes:
    """Tests for remote listings."""

    def test_remote_names_are_distinct(self, fake_runner, repo):
        fake_runner.responses[LIST_REMOTES] = (
            "origin\tgit@github.com:acme/widgets.git (fetch)\n"
            "origin\tgit@github.com:acme/widgets.git (push)\n"
            "upstream\thttps://github.com/core/widgets.git (fetch)"
        )
        assert repo.remote_names() == ["origin", "upstream"]

    def test_remote_branches(self, fake_runner, repo):
        fake_runner.responses[LIST_REMOTE_BRANCHES] = "origin/HEAD|a|b\norigin/main|carol|2024-01-01"
        (branch,) = repo.remote_branches()
        assert branch.full_name == "origin/main"


class TestCommits:
    """Tests for commit listing."""

    def test_count_and_branch_in_args(self, fake_runner, repo):
        fake_runner.responses[commits_args("develop", 2)] = "a1|X|2024-01-02|one\nb2|Y|2024-01-01|two"
        commits = repo.commits("develop", 2)
        assert [c.message for c in commits] == ["one", "two"]


class TestStatus:
    """Tests for changes, upstream and ahead/behind."""

    def test_changes_use_raw_output(self, fake_runner, repo):
        fake_runner.responses[STATUS] = " M src/app.py\n?? notes.txt\n"
        assert repo.changes() == [FileChange("M", "src/app.py"), FileChange("??", "notes.txt")]
        assert STATUS in fake_runner.raw_calls

    def test_has_uncommitted_changes(self, fake_runner, repo):
        fake_runner.responses[STATUS] = ""
        assert repo.has_uncommitted_changes() is False

    def test_upstream(self, fake_runner, repo):
        fake_runner.responses[UPSTREAM] = "origin/main"
        assert repo.upstream() == "origin/main"

    def test_no_upstream(self, fake_runner, repo):
        fake_runner.responses[UPSTREAM] = git_failure("rev-parse", stderr="fatal: no upstream configured")
        assert repo.upstream() is None

    def test_ahead_behind(self, fake_runner, repo):
        fake_runner.responses[ahead_behind_args("origin/main")] = "3\t2"
        assert repo.ahead_behind("origin/main") == (3, 2)

    def test_current_branch(self, fake_runner, repo):
        fake_runner.responses[CURRENT_BRANCH] = "main"
        assert repo.current_branch() == "main"


class TestCommands:
    """Tests for write operations."""

    def test_add_files(self, fake_runner, repo):
        fake_runner.responses[("add", "--", ":(top,literal)a.py", ":(top,literal)my file.txt")] = ""
        repo.add(["a.py", "my file.txt"])
        assert fake_runner.called("add", "--", ":(top,literal)a.py", ":(top,literal)my file.txt")

    def test_add_nothing(self, fake_runner, repo):
        repo.add([])
        assert fake_runner.calls == []

    def test_commit_returns_short_hash(self, fake_runner, repo):
        fake_runner.responses.update(
            {
                ("commit", "-m", "Fix bug"): "[main abc1234] Fix bug",
                ("rev-parse", "--short", "HEAD"): "abc1234",
            }
        )
        assert repo.commit("Fix bug") == "abc1234"

    def test_push_with_upstream(self, fake_runner, repo):
        fake_runner.responses[("push", "-u", "origin", "feature")] = ""
        repo.push("origin", "feature", set_upstream=True)
        assert fake_runner.called("push", "-u", "origin", "feature")

    def test_pull_remote_branch(self, fake_runner, repo):
        fake_runner.responses[("pull", "origin", "main")] = "Already up to date."
        assert repo.pull("origin", "main") == "Already up to date."

    def test_reset_soft(self, fake_runner, repo):
        fake_runner.responses[("reset", "--soft", "HEAD~1")] = ""
        repo.reset_soft()
        assert fake_runner.called("reset", "--soft", "HEAD~1")

    def test_fetch_all(self, fake_runner, repo):
        fake_runner.responses[("fetch", "--all")] = ""
        repo.fetch(all_remotes=True)
        assert fake_runner.called("fetch", "--all")

    def test_create_branch(self, fake_runner, repo):
        fake_runner.responses[("checkout", "-b", "feature")] = ""
        repo.create_branch("feature")
        assert fake_runner.called("checkout", "-b", "feature")


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestStagingFromSubdirectory:
    """Staging status paths against a real repository, from a subdirectory."""

    @pytest.fixture
    def work_tree(self, temp_dir: Path) -> Path:
        root = temp_dir / "repo"
        root.mkdir()
        subprocess.run(["git", "init", "-q", str(root)], check=True)
        (root / "sub").mkdir()
        (root / "sub" / "file.txt").write_text("nested\n", encoding="utf-8")
        (root / "café.txt").write_text("accent\n", encoding="utf-8")
        (root / "a b.txt").write_text("space\n", encoding="utf-8")
        return root

    def _workflow(self, cwd: Path) -> Workflow:
        return Workflow(GitRepository(SubprocessGitRunner(cwd)))

    def test_status_paths_are_root_relative_and_decoded(self, work_tree: Path):
        changes = self._workflow(work_tree / "sub").list_changes()
        assert {change.path for change in changes} == {"sub/", "café.txt", "a b.txt"}

    def test_stage_selected_paths(self, work_tree: Path):
        workflow = self._workflow(work_tree / "sub")
        workflow.stage_files([change.path for change in workflow.list_changes()])

        staged = {change.path: change.status for change in workflow.list_changes()}
        assert staged == {"sub/file.txt": "A", "café.txt": "A", "a b.txt": "A"}

    def test_stage_only_selection(self, work_tree: Path):
        workflow = self._workflow(work_tree / "sub")
        workflow.stage_files(["café.txt"])

        statuses = {change.path: change.status for change in workflow.list_changes()}
        assert statuses == {"café.txt": "A", "a b.txt": "??", "sub/": "??"}
