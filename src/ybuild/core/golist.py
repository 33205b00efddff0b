"""
Queries answered by the Go tool: package kind, in-module dependencies, environment.
"""

import re
import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from loguru import logger

from .cancel import CancelToken
from .exceptions import CommandError
from .runner import Runner, run_command

__all__ = ['PackageInfo', 'GoPackages', 'module_path', 'go_env']

_MODULE_RE = re.compile(r'^\s*module\s+"?([^\s"]+)"?', re.MULTILINE)


class PackageInfo(Protocol):
    def is_command(self, target: str) -> bool: ...


def module_path(go_mod: Path) -> str | None:
    """
    Read the module path from the ``module`` directive of a go.mod file.

    :param go_mod: Path to go.mod
    :return: The module path, or None if the file is missing or has no module directive
    """
    try:
        content = go_mod.read_text(encoding='utf-8')
    except OSError:
        return None
    match = _MODULE_RE.search(content)
    return match.group(1) if match else None


def go_env(name: str) -> str:
    """
    Get a variable from ``go env``.

    :return: The value, or empty string if the Go tool is not available
    """
    if shutil.which('go') is None:
        return ''
    try:
        result = subprocess.run(['go', 'env', name], capture_output=True, text=True, check=False)
    except OSError:
        return ''
    return result.stdout.strip() if result.returncode == 0 else ''


class GoPackages:
    """
    Package metadata of targets in a Go module, through ``go list``.
    """

    def __init__(self, module_root: Path | str = '.', cancel: CancelToken | None = None,
                 runner: Runner = run_command, log=logger):
        self.module_root = Path(module_root)
        self.cancel = cancel
        self.runner = runner
        self.log = log

    def _list(self, target: str, fmt: str) -> str:
        return self.runner(['go', 'list', '-f', fmt, './' + target], cwd=self.module_root,
                           cancel=self.cancel, log=self.log)

    def is_command(self, target: str) -> bool:
        """
        Check if the target is an executable (``package main``) rather than a library.

        :raises CommandError: If ``go list`` fails
        """
        return self._list(target, '{{.Name}}').strip() == 'main'

    def deps(self, target: str, prefix: str | None = None) -> list[str]:
        """
        List the dependencies of a target that live inside the module.

        A failing ``go list`` is logged, and whatever it printed is still used.

        :param target: The target
        :param prefix: Import path prefix to keep (defaults to the module path from go.mod)
        :return: Dependency paths relative to the prefix
        """
        if prefix is None:
            module = module_path(self.module_root / 'go.mod')
            prefix = module + '/' if module else ''
        try:
            output = self._list(target, '{{range .Deps}}{{.}}\n{{end}}')
        except CommandError as e:
            self.log.error("go list deps of {} failed: {}\n{}", target, e, e.output)
            output = e.output

        deps = []
        for line in output.splitlines():
            line = line.strip()
            if prefix and line.startswith(prefix):
                deps.append(line[len(prefix):])
        return deps
