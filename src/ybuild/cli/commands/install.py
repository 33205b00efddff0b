from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..app import app, app_state
from ..utils.error_handler import BuildErrorHandler
from ...core.exceptions import BuildCancelled, BuildError
from ...core.golist import GoPackages
from ...core.installer import Installer
from ...utils.file_utils import read_dir_links

__all__ = []

console = Console()


def expand_targets(targets: list[str] | None, from_dir: Path | None) -> list[str]:
    """
    Collect targets from the command line and from the entries of a directory.

    Duplicates are dropped, the first occurrence keeps its place.
    """
    result = list(targets or [])
    if from_dir is not None:
        try:
            result.extend(read_dir_links(from_dir))
        except OSError as e:
            typer.secho(f"Cannot read {from_dir}: {e}", fg="red", err=True)
            raise typer.Exit(1)
    return list(dict.fromkeys(t.rstrip('/') for t in result))


@app.command()
def install(
        targets: list[str] | None = typer.Argument(
            None, show_default=False,
            help="Targets to install (directories relative to the module root)"
        ),
        from_dir: Path | None = typer.Option(
            None, "--from-dir", "-d", file_okay=False,
            help="Also install every target named by an entry of this directory"
        ),
        force: bool = typer.Option(
            False, "--force", "-f",
            help="Install even if the installed binary is up-to-date"
        ),
        force_generate: bool = typer.Option(
            False, "--force-generate", "-g",
            help="Run the code generator even if generated code is up-to-date"
        ),
        jobs: int | None = typer.Option(
            None, "--jobs", "-j", min=1,
            help="Number of targets to install in parallel (defaults to the configured value)"
        ),
):
    """
    Install targets with [cyan]go install[/cyan], regenerating templates first if needed.

    Targets whose installed binary is newer than go.mod, their Go sources and their
    templates are skipped.
    """
    targets = expand_targets(targets, from_dir)
    if not targets:
        typer.secho("No targets given!", fg="red", err=True)
        raise typer.Exit(2)

    error_handler = BuildErrorHandler()
    with error_handler:
        config = app_state.config
        cancel = app_state.cancel
        installer = Installer(config, registry=app_state.registry,
                              packages=GoPackages(config.module_root, cancel=cancel))

    def _install(target: str) -> bool:
        return installer.install(target, force=force, force_generate=force_generate, cancel=cancel)

    results: dict[str, bool | BuildError] = {}
    with ThreadPoolExecutor(max_workers=jobs or config.jobs) as executor:
        futures = {target: executor.submit(_install, target) for target in targets}
        try:
            for target, future in futures.items():
                try:
                    results[target] = future.result()
                except BuildError as e:
                    results[target] = e
                    if not isinstance(e, BuildCancelled):
                        error_handler.report(e)
        except KeyboardInterrupt:
            cancel.cancel("interrupted")
            executor.shutdown(wait=True, cancel_futures=True)
            console.print("[yellow]Interrupted[/yellow]")
            raise typer.Exit(130)

    table = Table(title="Install")
    table.add_column("Target", style="cyan")
    table.add_column("Result")
    for target, result in results.items():
        if isinstance(result, BuildCancelled):
            table.add_row(target, "[yellow]cancelled[/yellow]")
        elif isinstance(result, BuildError):
            table.add_row(target, "[red]failed[/red]")
        elif result:
            table.add_row(target, "[green]✓ installed[/green]")
        else:
            table.add_row(target, "[dim]up-to-date[/dim]")
    console.print(table)

    installed = app_state.registry.installed()
    if installed:
        console.print(f"Installed: [cyan]{', '.join(sorted(installed))}[/cyan]")

    if any(isinstance(r, BuildError) for r in results.values()):
        raise typer.Exit(1)
