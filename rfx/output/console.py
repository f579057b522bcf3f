# RFX Console Output
# Rich-based tables, JSON output and prompts

import json
from collections.abc import Sequence
from typing import Any, Optional, Protocol

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from rfx.config.schema import OutputConfig
from rfx.errors import UserCancelled
from rfx.models import (
    BranchInfo,
    CommitInfo,
    FileChange,
    RemoteBranchInfo,
    RemoteInfo,
    StatusSummary,
)


class Serializable(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


_STATUS_STYLES = {
    "M": "yellow",
    "A": "green",
    "D": "red",
    "R": "cyan",
    "C": "cyan",
    "U": "bold red",
    "??": "dim",
}


def truncate(text: str, width: int) -> str:
    """Shorten text to width characters, marking the cut with an ellipsis."""
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"


def describe_upstream(status: StatusSummary) -> str:
    """Human-readable relation between the branch and its upstream."""
    if not status.has_upstream:
        return "No upstream branch"
    if status.up_to_date:
        return f"Up to date with {status.upstream}"

    parts = []
    if status.ahead:
        parts.append(f"{status.ahead} ahead")
    if status.behind:
        parts.append(f"{status.behind} behind")
    return f"{', '.join(parts)} {status.upstream}"


class Console:
    """
    Console output manager using Rich.

    Renders workflow records as tables or JSON and asks the user questions.
    """

    def __init__(
        self,
        output: Optional[OutputConfig] = None,
        *,
        console: Optional[RichConsole] = None,
    ):
        """
        Initialize console.

        Args:
            output: Output settings (colors, column widths).
            console: Rich console to write to.
        """
        self.output = output or OutputConfig()
        self._console = console or RichConsole(no_color=not self.output.colored)

    @property
    def rich(self) -> RichConsole:
        return self._console

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_json(self, records: Sequence[Serializable]) -> None:
        """Print records as an indented JSON array."""
        data = [record.to_dict() for record in records]
        # Plain write: JSON must not be re-wrapped or highlighted.
        self._console.out(json.dumps(data, indent=2), highlight=False)

    def print_object_json(self, record: Serializable) -> None:
        self._console.out(json.dumps(record.to_dict(), indent=2), highlight=False)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def print_branches(self, branches: Sequence[BranchInfo]) -> None:
        if not branches:
            self._console.print("[dim]No branches found[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Branch", style="cyan")
        table.add_column("Author")
        table.add_column("Created", style="dim")
        table.add_column("Last Change", style="dim")
        table.add_column("Last Commit")

        for branch in branches:
            table.add_row(
                escape(truncate(branch.name, self.output.max_branch_width)),
                escape(truncate(branch.author, self.output.max_author_width)),
                branch.time_created,
                branch.last_change,
                escape(truncate(branch.last_commit, self.output.max_message_width)),
            )

        self._console.print(table)

    def print_remotes(self, remotes: Sequence[RemoteInfo]) -> None:
        if not remotes:
            self._console.print("[dim]No remotes configured[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Remote", style="cyan")
        table.add_column("URL")
        table.add_column("Direction", style="dim")
        table.add_column("Host")
        table.add_column("Owner")
        table.add_column("Repo")

        for remote in remotes:
            table.add_row(
                escape(remote.name),
                escape(remote.url),
                remote.direction.value,
                escape(remote.host or "-"),
                escape(remote.owner or "-"),
                escape(remote.repo or "-"),
            )

        self._console.print(table)

    def print_commits(self, commits: Sequence[CommitInfo], *, branch: str = "") -> None:
        if not commits:
            self._console.print("[dim]No commits found[/dim]")
            return

        title = f"Commits on {escape(branch)}" if branch else None
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Hash", style="yellow")
        table.add_column("Author")
        table.add_column("Date", style="dim")
        table.add_column("Message")

        for commit in commits:
            table.add_row(commit.hash, escape(commit.author), commit.date, escape(commit.message))

        self._console.print(table)

    def print_remote_branches(self, branches: Sequence[RemoteBranchInfo]) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Remote Branch", style="cyan")
        table.add_column("Author")
        table.add_column("Date", style="dim")

        for index, branch in enumerate(branches, start=1):
            table.add_row(str(index), escape(branch.full_name), escape(branch.author), branch.date)

        self._console.print(table)

    def print_changes(self, changes: Sequence[FileChange]) -> None:
        """Print changed files with colored status codes."""
        for change in changes:
            style = _STATUS_STYLES.get(change.status[:1], "white")
            if change.is_untracked:
                style = _STATUS_STYLES["??"]
            self._console.print(f"  [{style}]{escape(change.status):>2}[/{style}] {escape(change.display_path)}")

    def print_status(self, status: StatusSummary) -> None:
        self._console.print(f"On branch [bold cyan]{escape(status.branch)}[/bold cyan]")

        relation = describe_upstream(status)
        if not status.has_upstream:
            self._console.print(f"[dim]{relation}[/dim]")
        elif status.up_to_date:
            self._console.print(f"[green]{escape(relation)}[/green]")
        else:
            self._console.print(f"[yellow]{escape(relation)}[/yellow]")

        self._console.print()
        if status.is_clean:
            self._console.print("[green]Working tree clean[/green]")
            return

        self._console.print(f"[bold]Changes ({len(status.changes)}):[/bold]")
        self.print_changes(status.changes)

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    def confirm(self, message: str, default: bool = False) -> bool:
        """
        Ask for confirmation.

        Raises:
            UserCancelled: If the prompt is interrupted.
        """
        try:
            return Confirm.ask(message, default=default, console=self._console)
        except (KeyboardInterrupt, EOFError):
            raise UserCancelled()

    def ask(self, message: str, default: Optional[str] = None) -> str:
        """
        Ask for free text.

        Raises:
            UserCancelled: If the prompt is interrupted.
        """
        try:
            if default is None:
                return Prompt.ask(message, console=self._console)
            return Prompt.ask(message, default=default, console=self._console)
        except (KeyboardInterrupt, EOFError):
            raise UserCancelled()

    def choose(self, message: str, options: Sequence[str], default: Optional[str] = None) -> str:
        """
        Numbered single choice.

        Args:
            message: Question text.
            options: Values to choose from.
            default: Preselected value, if it is one of the options.

        Returns:
            The chosen option.
        """
        for index, option in enumerate(options, start=1):
            marker = " [dim](default)[/dim]" if option == default else ""
            self._console.print(f"  [cyan]{index}[/cyan] - {escape(option)}{marker}")

        choices = [str(index) for index in range(1, len(options) + 1)]
        default_choice = str(options.index(default) + 1) if default in options else None
        try:
            if default_choice is None:
                answer = Prompt.ask(message, choices=choices, console=self._console)
            else:
                answer = Prompt.ask(message, choices=choices, default=default_choice, console=self._console)
        except (KeyboardInterrupt, EOFError):
            raise UserCancelled()
        return options[int(answer) - 1]

    def choose_many(self, message: str, options: Sequence[str]) -> list[str]:
        """
        Pick several options by number ("1 3 4" or "1,3").

        Re-asks until every number is valid; an empty answer selects nothing.
        """
        for index, option in enumerate(options, start=1):
            self._console.print(f"  [cyan]{index}[/cyan] - {escape(option)}")

        while True:
            answer = self.ask(message, default="")
            tokens = answer.replace(",", " ").split()
            if not tokens:
                return []
            try:
                indexes = [int(token) for token in tokens]
            except ValueError:
                self._console.print("[yellow]Please enter numbers from the list[/yellow]")
                continue
            if all(1 <= index <= len(options) for index in indexes):
                selected: list[str] = []
                for index in indexes:
                    if options[index - 1] not in selected:
                        selected.append(options[index - 1])
                return selected
            self._console.print(f"[yellow]Please enter numbers between 1 and {len(options)}[/yellow]")


def create_console(output: Optional[OutputConfig] = None) -> Console:
    """
    Create a console instance.

    Args:
        output: Output settings.

    Returns:
        Console instance.
    """
    return Console(output)
