"""
Cancellation token shared between the caller and a running build.
"""

import threading

from .exceptions import BuildCancelled

__all__ = ['CancelToken']


class CancelToken:
    """
    Thread-safe cancellation signal.

    The caller keeps a reference and calls :meth:`cancel`, long-running operations call :meth:`check`
    at every suspension point.
    """

    def __init__(self):
        self._event = threading.Event()
        self._reason: str | None = None

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation (idempotent, the first reason wins)."""
        if self._event.is_set():
            return
        self._reason = (reason or "cancelled").strip() or "cancelled"
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def check(self) -> None:
        """
        :raises BuildCancelled: If cancellation has been requested
        """
        if self._event.is_set():
            raise BuildCancelled(self._reason)
