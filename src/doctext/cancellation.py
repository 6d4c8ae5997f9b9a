"""Cooperative cancellation signal shared between the pipeline and extractors."""
from __future__ import annotations

import threading

from .errors import ExtractionCancelled


class CancellationToken:
    """Thread-safe, one-way cancellation flag.

    Nothing is interrupted preemptively: the pipeline checks the token at
    admission points and extractors check it at coarse checkpoints (per page,
    sheet or slide). A token created with a `parent` also reports cancelled
    once the parent is. Timeouts are built on top with `cancel_after`.
    """

    def __init__(self, parent: CancellationToken | None = None) -> None:
        self._event = threading.Event()
        self._parent = parent
        self._timers: list[threading.Timer] = []
        self._lock = threading.Lock()

    @property
    def is_cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.is_cancelled

    def cancel(self) -> None:
        self._event.set()

    def cancel_after(self, seconds: float) -> None:
        """Schedule cancellation after `seconds`."""
        timer = threading.Timer(seconds, self.cancel)
        timer.daemon = True
        with self._lock:
            self._timers.append(timer)
        timer.start()

    def raise_if_cancelled(self) -> None:
        if self.is_cancelled:
            raise ExtractionCancelled("Extraction was cancelled")

    def dispose(self) -> None:
        """Stop any pending `cancel_after` timers."""
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()
