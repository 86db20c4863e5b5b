# =============================================================================
# core/context.py  —  Per-invocation deadline & cancellation
# =============================================================================
#
# Every tool call gets its own InvocationContext.  It travels with the call
# all the way down to the Dgraph adapter, which:
#   - passes remaining() as the gRPC timeout, and
#   - registers a callback so cancel() aborts the in-flight gRPC future.
#
# The MCP layer calls cancel() when the client cancels the request.
# =============================================================================

import logging
import threading
import time
from typing import Callable, Optional

from core.errors import Cancelled

logger = logging.getLogger(__name__)


class InvocationContext:
    """Deadline and cancellation token for one invocation."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        self._deadline = time.monotonic() + timeout if timeout else None
        self._cancelled = threading.Event()
        self._callbacks: list[Callable[[], object]] = []
        self._lock = threading.Lock()

    # --- state --------------------------------------------------------------
    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is none."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def check(self) -> None:
        """Raise Cancelled if the invocation is no longer allowed to proceed."""
        if self.cancelled:
            raise Cancelled("invocation was cancelled by the caller")
        if self.expired:
            raise Cancelled("invocation deadline exceeded")

    # --- cancellation -------------------------------------------------------
    def on_cancel(self, callback: Callable[[], object]) -> Callable[[], None]:
        """Run ``callback`` when the context is cancelled.

        If the context is already cancelled the callback runs immediately.
        Returns a function that unregisters the callback.
        """
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return lambda: self._remove(callback)
        callback()
        return lambda: None

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.warning("cancel callback %r failed", callback, exc_info=True)

    def _remove(self, callback: Callable[[], object]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)
