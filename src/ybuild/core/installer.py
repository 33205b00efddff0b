"""
Install orchestration: regenerate code if needed, then ``go install`` if needed.
"""

import shutil
from pathlib import Path

from loguru import logger

from ..config import BuildConfig
from ..types.generator import GeneratorKind, GeneratorSpec, spec_for
from .cancel import CancelToken
from .evaluator import should_build
from .exceptions import BuildError, CommandError, ToolInstallError
from .golist import GoPackages, PackageInfo
from .registry import InstallRegistry
from .runner import Runner, run_command
from .staleness import generator_staleness

__all__ = ['Installer']


class Installer:
    """
    Installs targets of a Go module, skipping work that is already done.

    One instance may be shared by threads installing different targets, the only shared
    mutable state is the :class:`InstallRegistry`.
    """

    def __init__(self, config: BuildConfig, registry: InstallRegistry | None = None,
                 packages: PackageInfo | None = None, runner: Runner = run_command, log=logger):
        """
        :param config: Build configuration
        :param registry: Where successfully installed targets are recorded
        :param packages: Package metadata query (defaults to ``go list``)
        :param runner: Runs external programs
        :param log: Logger
        """
        self.config = config
        self.registry = registry if registry is not None else InstallRegistry()
        self.packages = packages if packages is not None else GoPackages(config.module_root,
                                                                         runner=runner, log=log)
        self.runner = runner
        self.log = log

    def resolve_tool(self, spec: GeneratorSpec, cancel: CancelToken | None = None, log=None) -> str:
        """
        Find the executable of a generator, installing it with ``go install`` if it is missing.

        :param spec: The generator
        :param cancel: Cancellation token
        :param log: Logger
        :return: Path of the executable
        :raises ToolInstallError: If the executable can't be found even after installing it
        """
        log = log or self.log
        path = self._which(spec.executable)
        if path:
            return path

        log.warning("{} not found, installing it from {}", spec.executable, spec.module)
        try:
            self.runner(['go', 'install', spec.module + '@latest'], cwd=self.config.module_root,
                        cancel=cancel, log=log)
        except CommandError as e:
            raise ToolInstallError(f"Cannot install {spec.executable}: {e}", command=e.command,
                                   returncode=e.returncode, output=e.output) from e

        path = self._which(spec.executable)
        if not path:
            raise ToolInstallError(f"{spec.executable} is still not available after installing "
                                   f"{spec.module}")
        return path

    def _which(self, executable: str) -> str | None:
        # Freshly installed tools land in the install root, which may not be on PATH
        path = shutil.which(executable)
        if path is None and self.config.install_root is not None:
            path = shutil.which(executable, path=str(self.config.install_root))
        return path

    def generate(self, target: str, kind: GeneratorKind, cancel: CancelToken | None = None,
                 log=None) -> str:
        """
        Run the generator of the given kind in the target directory.

        :return: Output of the generator
        :raises CommandError: If the generator fails
        """
        log = log or self.log.bind(target=target)
        spec = spec_for(kind)
        executable = self.resolve_tool(spec, cancel=cancel, log=log)
        return self.runner([executable, *spec.args], cwd=self.config.target_dir(target),
                           cancel=cancel, log=log)

    def compile_args(self, target: str) -> list[str]:
        args = ['go', 'install', '-ldflags=-s -w']
        if self.config.build_tags:
            args.append('-tags=' + self.config.build_tags)
        args.append('./' + Path(target).as_posix())
        return args

    def install(self, target: str, force: bool = False, force_generate: bool = False,
                cancel: CancelToken | None = None) -> bool:
        """
        Regenerate and install a target, if it is out of date.

        :param target: The target, relative to the module root
        :param force: Install even if the target is up-to-date
        :param force_generate: Run the generator even if generated code is up-to-date
        :param cancel: Cancellation token
        :return: True if the target was installed, False if there was nothing to do
        :raises ProbeError: If a generator-source file can't be stat'ed
        :raises CommandError: If the generator or the compiler fails
        :raises ToolInstallError: If the generator is missing and can't be installed
        :raises BuildCancelled: If cancelled
        """
        log = self.log.bind(target=target)
        try:
            kind = generator_staleness(self.config.target_dir(target),
                                       force_regenerate=force_generate, cancel=cancel, log=log)
            if kind is not GeneratorKind.NONE:
                self.generate(target, kind, cancel=cancel, log=log)

            if not force and not should_build(target, self.config, self.packages,
                                              cancel=cancel, log=log):
                log.debug("Up-to-date")
                return False

            self.runner(self.compile_args(target), cwd=self.config.module_root, cancel=cancel, log=log)
        except BuildError as e:
            if e.target is None:
                e.target = target
            raise

        self.registry.record(target)
        log.info("Installed")
        return True