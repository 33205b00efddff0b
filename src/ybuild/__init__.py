"""Incremental installer for Go commands with code generators."""

from .config import BuildConfig, ConfigManager
from .core.cancel import CancelToken
from .core.evaluator import BuildDecision, explain_build, should_build
from .core.exceptions import (
    BuildError,
    BuildCancelled,
    CommandError,
    ConfigError,
    ProbeError,
    ToolInstallError,
)
from .core.installer import Installer
from .core.registry import InstallRegistry
from .core.staleness import generator_staleness
from .types.generator import GeneratorKind
from .utils.mtime_utils import NO_TIMESTAMP, latest_mtime

__all__ = [
    "BuildConfig",
    "ConfigManager",
    "CancelToken",
    "BuildDecision",
    "explain_build",
    "should_build",
    "BuildError",
    "BuildCancelled",
    "CommandError",
    "ConfigError",
    "ProbeError",
    "ToolInstallError",
    "Installer",
    "InstallRegistry",
    "generator_staleness",
    "GeneratorKind",
    "NO_TIMESTAMP",
    "latest_mtime",
]
