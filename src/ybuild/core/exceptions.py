"""
Exceptions of the build engine.
"""

from typing import Sequence


class BuildError(Exception):
    """Base exception for build-related errors."""

    def __init__(self, message: str = "", target: str | None = None):
        super().__init__(message)
        self.target = target


class ConfigError(BuildError):
    """Invalid or missing configuration."""
    pass


class ProbeError(BuildError):
    """A file that must exist could not be stat'ed."""

    def __init__(self, message: str, path: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path


class CommandError(BuildError):
    """A subprocess (generator, compiler, go tool) failed."""

    def __init__(self, message: str, command: Sequence[str] = (), returncode: int | None = None,
                 output: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.command = list(command)
        self.returncode = returncode
        self.output = output


class ToolInstallError(CommandError):
    """A generator executable is not available and could not be installed."""
    pass


class BuildCancelled(BuildError):
    """The build was cancelled by the caller."""

    def __init__(self, reason: str | None = None, **kwargs):
        super().__init__(reason or "cancelled", **kwargs)
        self.reason = reason or "cancelled"
