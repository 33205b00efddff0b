import typer
from rich.console import Console
from rich.table import Table

from ..app import app, app_state
from ..utils.error_handler import BuildErrorHandler
from ...core.evaluator import explain_build
from ...core.golist import GoPackages

__all__ = []

console = Console()

# Distinct from the status of a failed check (1)
NEEDS_INSTALL_EXIT_CODE = 3


@app.command()
def check(
        targets: list[str] = typer.Argument(..., help="Targets to check"),
        exit_code: bool = typer.Option(
            False, "--exit-code", "-e",
            help="Exit with status 3 if any target needs to be installed"
        ),
):
    """
    Show which targets need to be installed, and why. Nothing is built.
    """
    with BuildErrorHandler():
        config = app_state.config
        packages = GoPackages(config.module_root, cancel=app_state.cancel)

        table = Table(title="Build check")
        table.add_column("Target", style="cyan")
        table.add_column("Install")
        table.add_column("Reason")

        any_rebuild = False
        for target in targets:
            decision = explain_build(target, config, packages, cancel=app_state.cancel)
            any_rebuild = any_rebuild or decision.rebuild
            table.add_row(target, "[yellow]yes[/yellow]" if decision.rebuild else "[green]no[/green]",
                          decision.reason)

    console.print(table)
    if exit_code and any_rebuild:
        raise typer.Exit(NEEDS_INSTALL_EXIT_CODE)
