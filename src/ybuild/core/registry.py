"""
Targets installed during the current run.
"""

from ..utils.rwlock import RWLock

__all__ = ['InstallRegistry']


class InstallRegistry:
    """
    Set of target names successfully installed in this process.

    Entries are only added, or all cleared at once with :meth:`reset`. Safe to share between
    threads installing different targets.
    """

    def __init__(self):
        self._lock = RWLock()
        self._installed: set[str] = set()

    def record(self, name: str) -> None:
        with self._lock.write():
            self._installed.add(name)

    def installed(self) -> frozenset[str]:
        """Snapshot of the installed target names."""
        with self._lock.read():
            return frozenset(self._installed)

    def reset(self) -> None:
        with self._lock.write():
            self._installed.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock.read():
            return name in self._installed

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._installed)
