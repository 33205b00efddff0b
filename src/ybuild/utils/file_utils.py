"""Filesystem helpers."""

import os
from pathlib import Path


def read_dir_links(path: Path | str) -> list[str]:
    """
    List the entry names of a directory, sorted.

    Used to expand a directory of symlinks (or subdirectories) into a list of targets.

    :param path: Directory to read
    :return: Sorted entry names
    :raises OSError: If the directory can't be read
    """
    with os.scandir(path) as it:
        return sorted(entry.name for entry in it)
