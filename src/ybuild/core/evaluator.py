"""
Decide whether a target has to be (re)installed.
"""

from dataclasses import dataclass

from loguru import logger

from ..config import BuildConfig
from ..types.generator import GeneratorKind
from ..utils.mtime_utils import NO_TIMESTAMP, latest_mtime
from .cancel import CancelToken
from .exceptions import ProbeError
from .golist import PackageInfo
from .staleness import generator_staleness

__all__ = ['BuildDecision', 'explain_build', 'should_build']


@dataclass(frozen=True)
class BuildDecision:
    """
    Outcome of the build-necessity check.

    :param rebuild: Whether the target must be built
    :param reason: Human readable reason of the decision
    """
    rebuild: bool
    reason: str

    def __bool__(self) -> bool:
        return self.rebuild


def explain_build(target: str, config: BuildConfig, packages: PackageInfo,
                  cancel: CancelToken | None = None, log=logger) -> BuildDecision:
    """
    Decide whether a target must be built, and why.

    The checks, in order:

    1. a generator-source file is newer than its generated code (or can't be stat'ed)
    2. an executable target has no installed artifact
    3. the build-declaration file (go.mod) is newer than the artifact
    4. a Go source file of the target is newer than the artifact

    A library has no artifact of its own, so a missing artifact alone never rebuilds it.

    :param target: The target, relative to the module root
    :param config: Build configuration
    :param packages: Package metadata, to tell executables from libraries
    :param cancel: Cancellation token
    :param log: Logger
    :return: The decision
    :raises BuildCancelled: If cancelled
    """
    log = log.bind(target=target)
    target_dir = config.target_dir(target)

    try:
        kind = generator_staleness(target_dir, cancel=cancel, log=log)
    except ProbeError as e:
        log.warning("Generator check failed: {}", e)
        return BuildDecision(True, f"generator check failed: {e}")
    if kind is not GeneratorKind.NONE:
        return BuildDecision(True, f"{kind.value} generator sources changed")

    dest_time = latest_mtime(config.artifact_path(target))
    if dest_time == NO_TIMESTAMP:
        if packages.is_command(target):
            return BuildDecision(True, "not installed")
        return BuildDecision(False, "library, nothing installed")

    if latest_mtime(config.manifest_path) > dest_time:
        return BuildDecision(True, f"{config.manifest} is newer than the installed binary")

    if cancel is not None:
        cancel.check()
    sources = sorted(target_dir.glob('*.go'))
    if latest_mtime(*sources) > dest_time:
        return BuildDecision(True, "sources are newer than the installed binary")

    return BuildDecision(False, "up-to-date")


def should_build(target: str, config: BuildConfig, packages: PackageInfo,
                 cancel: CancelToken | None = None, log=logger) -> bool:
    """
    Check if a target must be built.

    See :func:`explain_build` for the rules.
    """
    decision = explain_build(target, config, packages, cancel=cancel, log=log)
    log.bind(target=target).debug("Rebuild: {} ({})", decision.rebuild, decision.reason)
    return decision.rebuild
