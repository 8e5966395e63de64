"""Cancellation tokens for asynchronous continuations."""

from __future__ import annotations

from typing import Callable


class CancellationToken:
    """Liveness flag captured when an async operation starts.

    Every continuation checks :attr:`alive` after each ``await`` and bails out
    instead of mutating shared state once the token has been cancelled.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def alive(self) -> bool:
        return not self._cancelled

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def on_cancel(self, callback: Callable[[], None]) -> None:
        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)

    def cancel(self) -> bool:
        """Cancel the token; return ``False`` if it was already cancelled."""
        if self._cancelled:
            return False
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
        return True
