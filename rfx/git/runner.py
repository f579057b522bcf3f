# RFX Git Runner
# Subprocess execution of git commands

import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Optional, Protocol

from rfx.errors import GitCommandError, GitSpawnError


class GitRunner(Protocol):
    """Executes git with a fixed argument vector."""

    def run(self, args: Sequence[str], *, raw: bool = False) -> str:
        """
        Run git and return its standard output.

        Raises:
            GitSpawnError: If git could not be started.
            GitCommandError: If git exited with a non-zero status.
        """
        ...


class SubprocessGitRunner:
    """GitRunner backed by subprocess.run."""

    def __init__(
        self,
        cwd: Optional[Path] = None,
        *,
        on_command: Optional[Callable[[list[str]], None]] = None,
    ):
        """
        Initialize runner.

        Args:
            cwd: Working directory (defaults to the process cwd).
            on_command: Called with the full command before each run.
        """
        self.cwd = cwd
        self.on_command = on_command

    def run(self, args: Sequence[str], *, raw: bool = False) -> str:
        """
        Run a git command.

        Args:
            args: Git command arguments (without the leading "git").
            raw: Return stdout verbatim instead of stripped. Needed for
                 fixed-column formats such as porcelain status.

        Returns:
            Captured standard output.

        Raises:
            GitSpawnError: If git is missing or cannot be executed.
            GitCommandError: If the command fails.
        """
        cmd = ["git", *args]
        if self.on_command is not None:
            self.on_command(cmd)

        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                check=False,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            raise GitSpawnError("git command not found. Is git installed?")
        except OSError as e:
            raise GitSpawnError(f"Failed to execute git: {e}")

        if result.returncode != 0:
            raise GitCommandError(
                args,
                returncode=result.returncode,
                stderr=result.stderr.strip() if result.stderr else "",
                stdout=result.stdout.strip() if result.stdout else "",
            )

        stdout = result.stdout or ""
        return stdout if raw else stdout.strip()
