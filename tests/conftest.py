import os
from pathlib import Path

import pytest

from ybuild.config import BuildConfig
from ybuild.core.exceptions import CommandError

# An arbitrary point in time, in milliseconds
BASE_TIME = 1_700_000_000_000


def set_file_mtime(path: Path | str, mtime: float) -> None:
    """Set access and modification time of a file, in milliseconds"""
    ns = int(mtime) * 1_000_000
    os.utime(path, ns=(ns, ns))


class FakeRunner:
    """
    Records commands instead of running them.

    :param failures: Map of program name -> (returncode, output) for commands that should fail
    :param on_run: Called with (args, cwd) before a command "succeeds"
    """

    def __init__(self, failures: dict[str, tuple[int, str]] | None = None, on_run=None,
                 outputs: dict[str, str] | None = None):
        self.calls: list[tuple[list[str], Path | None]] = []
        self.failures = failures or {}
        self.outputs = outputs or {}
        self.on_run = on_run

    def __call__(self, args, cwd=None, cancel=None, log=None, env=None) -> str:
        args = [str(a) for a in args]
        self.calls.append((args, Path(cwd) if cwd is not None else None))
        if cancel is not None:
            cancel.check()
        program = Path(args[0]).name
        if program in self.failures:
            code, output = self.failures[program]
            raise CommandError(f"{args!r} exited with status {code}", command=args,
                               returncode=code, output=output)
        if self.on_run is not None:
            self.on_run(args, cwd)
        return self.outputs.get(program, "")

    @property
    def programs(self) -> list[str]:
        return [Path(args[0]).name for args, _ in self.calls]


class FakePackages:
    """Package metadata with a fixed set of executables."""

    def __init__(self, commands=()):
        self.commands = set(commands)
        self.queries: list[str] = []

    def is_command(self, target: str) -> bool:
        self.queries.append(target)
        return target in self.commands


@pytest.fixture
def touch():
    """Create a file with the given modification time (in ms)"""

    def _touch(path: Path, mtime: float, content: str = "") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        set_file_mtime(path, mtime)
        return path

    return _touch


@pytest.fixture
def make_executable():
    """Create an executable placeholder script"""

    def _make(path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("#!/bin/sh\nexit 0\n")
        os.chmod(path, 0o755)
        return path

    return _make


@pytest.fixture
def module(tmp_path, touch):
    """A Go module with go.mod at BASE_TIME, and an empty install root"""
    root = tmp_path / "mod"
    root.mkdir()
    touch(root / "go.mod", BASE_TIME, "module example.com/tools\n\ngo 1.22\n")
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return BuildConfig(module_root=root, install_root=bin_dir)
