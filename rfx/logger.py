"""Rich console messages for rfx commands."""

from typing import Optional

from rich.console import Console
from rich.markup import escape


class RfxLogger:
    """Styled one-line status messages."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        """Initialize logger.

        Args:
            console: Rich Console instance
            verbose: Enable debug output
        """
        self.console = console or Console()
        self.verbose = verbose

    def info(self, message: str) -> None:
        """Blue info message."""
        self.console.print(f"[blue]ℹ[/blue] {escape(message)}")

    def success(self, message: str) -> None:
        """Green success message."""
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        """Yellow warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Red error message."""
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def hint(self, message: str) -> None:
        self.console.print(f"  [dim]→ {escape(message)}[/dim]")

    def debug(self, message: str) -> None:
        """Dim message, shown only in verbose mode."""
        if self.verbose:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def command(self, cmd: list[str]) -> None:
        """Echo an external command in verbose mode."""
        self.debug(f"$ {' '.join(cmd)}")
