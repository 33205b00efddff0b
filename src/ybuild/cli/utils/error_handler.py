"""Centralized build error handling utilities for CLI commands."""

from rich.console import Console
from rich.markup import escape
from typer import Exit

from ...core.exceptions import (BuildCancelled, BuildError, CommandError, ConfigError, ProbeError,
                                ToolInstallError)


class BuildErrorHandler:
    """Context manager that prints build errors and exits with status 1."""

    def __init__(self, console: Console | None = None):
        if not console:
            console = Console(stderr=True)
        self.console = console

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None:
            return False
        if not isinstance(exc_value, BuildError):
            return False  # Let other exceptions propagate

        self.report(exc_value)
        raise Exit(130 if isinstance(exc_value, BuildCancelled) else 1)

    def report(self, e: BuildError) -> None:
        """Print an error, with the captured output of failed commands."""
        prefix = f"[bold]{escape(e.target)}[/bold]: " if e.target else ""

        if isinstance(e, BuildCancelled):
            self.console.print(f"[yellow]{prefix}Cancelled:[/yellow] {escape(e.reason)}")
        elif isinstance(e, ToolInstallError):
            self.console.print(f"[red]{prefix}Generator not available:[/red] {escape(str(e))}")
            self.console.print("[yellow]To fix:[/yellow] install it manually, or check that "
                               "[cyan]go install[/cyan] works and its bin directory is on PATH")
            self._print_output(e)
        elif isinstance(e, CommandError):
            self.console.print(f"[red]{prefix}Command failed:[/red] {escape(str(e))}")
            self._print_output(e)
        elif isinstance(e, ProbeError):
            self.console.print(f"[red]{prefix}Cannot check generator sources:[/red] {escape(str(e))}")
        elif isinstance(e, ConfigError):
            self.console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        else:
            self.console.print(f"[red]{prefix}Build error:[/red] {escape(str(e))}")

    def _print_output(self, e: CommandError) -> None:
        if not e.output:
            return
        # Verbatim, so the generator or compiler messages can be read as-is
        self.console.print(e.output.rstrip("\n"), markup=False, highlight=False)
