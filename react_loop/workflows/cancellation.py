from __future__ import annotations

import threading

from react_loop.errors import LoopCancelled


class CancellationToken:
    """Thread-safe flag checked at every model-call and tool-call boundary."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason = ""

    def cancel(self, reason: str = "cancelled by caller") -> None:
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise LoopCancelled(self.reason)
