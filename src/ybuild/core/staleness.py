"""
Detect generator-source files that are newer than their generated Go code.
"""

import os
from pathlib import Path
from typing import Iterator

from loguru import logger

from ..types.generator import GeneratorKind, generator_for
from ..utils.mtime_utils import latest_mtime
from .cancel import CancelToken
from .exceptions import ProbeError

__all__ = ['generator_staleness', 'walk_sorted']


def walk_sorted(root: Path | str, log=logger) -> Iterator[os.DirEntry]:
    """
    Walk a directory tree depth-first, in lexical order.

    Entries of each directory are sorted by name, subdirectories are descended in place (like
    Go's ``filepath.WalkDir``). Symlinks are not followed. Directories that can't be listed are
    logged and skipped.

    :param root: The directory to walk
    :param log: Logger to report unreadable directories
    :return: Iterator of directory entries
    """
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        log.warning("Skipping unreadable directory {}: {}", root, e)
        return

    for entry in entries:
        yield entry
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            log.warning("Skipping {}: {}", entry.path, e)
            continue
        if is_dir:
            yield from walk_sorted(entry.path, log)


def generator_staleness(root: Path | str, force_regenerate: bool = False,
                        cancel: CancelToken | None = None, log=logger) -> GeneratorKind:
    """
    Find the first generator kind whose generated code is out of date.

    The walk stops at the first stale generator-source file, so when several kinds need
    regeneration only the first one (in lexical walk order) is reported.

    :param root: Directory of the target
    :param force_regenerate: Report the first generator-source file found, whatever its mtime
    :param cancel: Cancellation token, checked on every visited entry
    :param log: Logger
    :return: The stale generator kind, or ``GeneratorKind.NONE``
    :raises ProbeError: If a generator-source file can't be stat'ed
    :raises BuildCancelled: If cancelled during the walk
    """
    for entry in walk_sorted(root, log):
        if cancel is not None:
            cancel.check()

        spec = generator_for(entry.name)
        if spec is None:
            continue
        try:
            if not entry.is_file(follow_symlinks=False):
                continue
            source_mtime = entry.stat(follow_symlinks=False).st_mtime_ns // 1_000_000
        except OSError as e:
            raise ProbeError(f"Cannot stat generator source {entry.path}: {e}", path=entry.path) from e

        source = Path(entry.path)
        if force_regenerate or source_mtime > latest_mtime(spec.companion(source)):
            log.debug("{} is stale ({})", source, spec.kind.value)
            return spec.kind

    return GeneratorKind.NONE
