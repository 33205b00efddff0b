import typer
from rich.console import Console

from ..app import app, app_state
from ..utils.error_handler import BuildErrorHandler
from ...core.golist import GoPackages

__all__ = []

console = Console()


@app.command()
def deps(
        target: str = typer.Argument(..., help="Target to list the dependencies of"),
        prefix: str | None = typer.Option(
            None, "--prefix", "-p",
            help="Import path prefix of in-module packages (defaults to the module path in go.mod)"
        ),
):
    """
    List the packages of this module a target depends on.
    """
    with BuildErrorHandler():
        config = app_state.config
        packages = GoPackages(config.module_root, cancel=app_state.cancel)
        for dep in packages.deps(target, prefix=prefix or config.module_prefix):
            console.print(dep, markup=False, highlight=False)
