"""Cooperative cancellation for network-bound operations.

A CancellationToken is handed down from the caller to every operation that
may block on I/O. Operations poll it between steps and abort when it is set.
Operations that can block inside a single read register an abort callback
with on_cancel() so that cancel() interrupts them immediately.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CancellationToken:
    """Thread-safe cancellation flag backed by threading.Event.

    Example:
        token = CancellationToken()
        worker = threading.Thread(target=service.get_catalog, args=(False, token))
        worker.start()
        token.cancel()  # open responses are closed, the worker raises
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    def cancel(self) -> None:
        """Request cancellation and run registered abort callbacks once."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            self._run(callback)

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback to run when the token is cancelled.

        The callback runs on the thread that calls cancel(). If the token is
        already cancelled it runs immediately on the calling thread.

        Args:
            callback: Zero-argument callable, typically closing a response.

        Returns:
            A function that unregisters the callback. Safe to call more
            than once and after cancellation.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return lambda: self._unregister(callback)

        self._run(callback)
        return lambda: None

    @property
    def cancelled(self) -> bool:
        """True once cancel() has been called."""
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or timeout elapses.

        Args:
            timeout: Seconds to wait, or None to wait forever.

        Returns:
            True if the token was cancelled.
        """
        return self._event.wait(timeout)

    def _unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

    @staticmethod
    def _run(callback: Callable[[], None]) -> None:
        # A failing abort must not stop the remaining callbacks
        try:
            callback()
        except Exception:
            logger.exception("Cancellation callback %r failed", callback)


def is_cancelled(token: CancellationToken | None) -> bool:
    """Return True if token is set. A missing token never cancels."""
    return token is not None and token.cancelled
