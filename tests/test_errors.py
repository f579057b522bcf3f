# Tests for rfx.errors
# Error taxonomy and friendly hints

from rfx.errors import (
    ErrorKind,
    GitCommandError,
    GitSpawnError,
    RfxError,
    UserCancelled,
    ValidationError,
    format_error,
    friendly_hint,
)


class TestFriendlyHint:
    """Tests for friendly_hint."""

    def test_rejected_push(self):
        hint = friendly_hint("! [rejected]        main -> main (fetch first)")
        assert "pull" in hint

    def test_case_insensitive_conflict(self):
        assert "conflict" in friendly_hint("CONFLICT (content): Merge conflict in a.py").lower()

    def test_unreachable_remote(self):
        assert "network" in friendly_hint("fatal: Could not read from remote repository.")

    def test_no_match(self):
        assert friendly_hint("fatal: pathspec 'x' did not match any files") is None


class TestFormatError:
    """Tests for format_error."""

    def test_command_error_shows_stderr(self):
        error = GitCommandError(["push"], returncode=1, stderr="error: failed to push\n")
        assert format_error(error) == "error: failed to push"

    def test_command_error_without_stderr(self):
        error = GitCommandError(["log"], returncode=128)
        assert format_error(error) == "Git command failed: git log (exit code 128)"

    def test_command_error_falls_back_to_stdout(self):
        error = GitCommandError(["pull"], returncode=1, stdout="CONFLICT (content): Merge conflict in a.py\n")
        assert format_error(error) == "CONFLICT (content): Merge conflict in a.py"

    def test_details_combine_streams(self):
        error = GitCommandError(["pull"], returncode=1, stderr="error: x", stdout="CONFLICT (content)")
        assert error.details == "error: x\nCONFLICT (content)"
        assert "conflict" in friendly_hint(error.details).lower()

    def test_validation_error(self):
        assert format_error(ValidationError("Branch name cannot contain spaces")) == "Branch name cannot contain spaces"


class TestErrorKinds:
    """Tests for the error taxonomy."""

    def test_kinds(self):
        assert GitSpawnError("x").kind == ErrorKind.SPAWN_FAILURE
        assert GitCommandError([], 1).kind == ErrorKind.TOOL_FAILURE
        assert ValidationError("x").kind == ErrorKind.VALIDATION_FAILURE

    def test_cancel_is_not_an_error(self):
        assert not issubclass(UserCancelled, RfxError)
