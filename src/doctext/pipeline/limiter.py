"""Counting slot pool bounding simultaneous extractions."""
from __future__ import annotations

import threading
import time


class ConcurrencyLimiter:
    """Thread-safe counter of in-use extraction slots.

    Unlike a bare semaphore it exposes how many slots are taken, and
    `release` refuses to go below zero so a double release shows up as an
    error instead of silently widening the bound.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"Invalid capacity: {capacity}. Must be at least 1.")
        self.capacity = capacity
        self._in_use = 0
        self._cond = threading.Condition()

    def acquire(self, timeout: float | None = None) -> bool:
        """Take a slot, waiting up to `timeout` seconds (forever if None)."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while self._in_use >= self.capacity:
                if deadline is None:
                    self._cond.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._cond.wait(remaining)
            self._in_use += 1
            return True

    def try_acquire(self) -> bool:
        with self._cond:
            if self._in_use >= self.capacity:
                return False
            self._in_use += 1
            return True

    def release(self) -> None:
        with self._cond:
            if self._in_use <= 0:
                raise RuntimeError("ConcurrencyLimiter released more times than acquired")
            self._in_use -= 1
            self._cond.notify()

    @property
    def in_use(self) -> int:
        with self._cond:
            return self._in_use

    @property
    def available(self) -> int:
        with self._cond:
            return self.capacity - self._in_use
