"""
CancellationToken — Cooperative cancellation for waits and invokes.
"""

import asyncio
import threading
from typing import Callable, Optional

from hubgen.core.errors import OperationCanceled


class CancellationToken:
    """
    A one-shot cancellation signal.

    Callbacks registered before cancel() run once when it fires;
    callbacks registered after it fired run immediately.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []
        self._lock = threading.Lock()
        self._timer: Optional[asyncio.TimerHandle] = None

    @classmethod
    def canceled(cls) -> "CancellationToken":
        """A token that has already fired."""
        token = cls()
        token.cancel()
        return token

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks, self._callbacks = self._callbacks, []
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

        for callback in callbacks:
            callback()

    def cancel_after(self, seconds: float) -> None:
        """Schedule cancel() on the running event loop."""
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._cancelled:
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = loop.call_later(seconds, self.cancel)

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Run callback on cancellation.

        Returns a function that unregisters the callback.
        """
        with self._lock:
            if not self._cancelled:
                self._callbacks.append(callback)
                return lambda: self._unregister(callback)

        callback()
        return lambda: None

    def _unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise OperationCanceled("The operation was canceled")

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"
