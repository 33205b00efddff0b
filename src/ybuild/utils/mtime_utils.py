"""File modification time utilities for incremental builds."""

import os
from pathlib import Path

__all__ = ['Timestamp', 'NO_TIMESTAMP', 'get_file_mtime', 'latest_mtime']

# Milliseconds since the epoch
Timestamp = float

# Missing files are older than everything
NO_TIMESTAMP: Timestamp = float('-inf')


def get_file_mtime(file_path: Path | str) -> Timestamp:
    """
    Get file modification time in milliseconds.

    :param file_path: Path to the file
    :return: Modification time, or NO_TIMESTAMP if the file can't be stat'ed
    """
    try:
        return os.stat(file_path).st_mtime_ns // 1_000_000
    except OSError:
        return NO_TIMESTAMP


def latest_mtime(*paths: Path | str) -> Timestamp:
    """
    Get the latest modification time of the given paths.

    Paths that don't exist (or can't be stat'ed) are skipped, they are simply not built yet.

    :param paths: Paths to check
    :return: The latest modification time, or NO_TIMESTAMP if none of the paths exist
    """
    latest = NO_TIMESTAMP
    for path in paths:
        mtime = get_file_mtime(path)
        if mtime > latest:
            latest = mtime
    return latest

