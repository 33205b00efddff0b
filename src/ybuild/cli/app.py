import sys
from dataclasses import dataclass, field
from pathlib import Path

import typer
from loguru import logger

from ..config import BuildConfig, ConfigManager
from ..core.cancel import CancelToken
from ..core.registry import InstallRegistry

__all__ = ['app', 'app_state', 'AppState']

LOG_FORMAT = "{time:HH:mm:ss.SSS} | {level:<8} | {extra[target]} - {message}"


@dataclass
class AppState:
    config_path: Path | None = None
    module_root: Path | None = None
    registry: InstallRegistry = field(default_factory=InstallRegistry)
    cancel: CancelToken = field(default_factory=CancelToken)
    _config: BuildConfig | None = None

    @property
    def config(self) -> BuildConfig:
        if self._config is None:
            self._config = ConfigManager.load_config(self.config_path, module_root=self.module_root)
        return self._config

    @config.setter
    def config(self, value: BuildConfig | None):
        self._config = value


app = typer.Typer(
    help="Incremental installer for Go commands with code generators.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app_state = AppState()


def setup_logging(level: str) -> None:
    logger.remove()
    logger.configure(extra={"target": "-"})
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=None,
               backtrace=False, diagnose=False)


@app.callback()
def main(
        config_path: Path | None = typer.Option(
            None, "--config", "-c", dir_okay=False,
            help="Path to TOML configuration file (defaults to ybuild.toml in the module root)"
        ),
        module_root: Path | None = typer.Option(
            None, "--module-root", "-C", file_okay=False,
            help="Root directory of the Go module", envvar="YBUILD_MODULE_ROOT"
        ),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug messages"),
        quiet: bool = typer.Option(False, "--quiet", "-q", help="Show only warnings and errors"),
):
    """
    Install Go commands, regenerating quicktemplate (.qtpl) and templ (.templ) code first
    when the templates changed, and skipping targets whose binary is up-to-date.

    CONFIGURATION:
        Default config: ybuild.toml in the module root
        Fallback config: ~/.ybuild/config.toml
        Environment: YBUILD_INSTALL_ROOT, YBUILD_BUILD_TAGS, YBUILD_JOBS
    """
    setup_logging("DEBUG" if verbose else "WARNING" if quiet else "INFO")

    app_state.config_path = config_path
    app_state.module_root = module_root
    app_state.config = None
    app_state.registry.reset()
    app_state.cancel = CancelToken()
