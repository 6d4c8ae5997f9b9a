"""Error sinks: where per-file and per-directory failures are reported.

A sink is passed explicitly to the walker and pipeline; there is no global
subscriber list.
"""
from __future__ import annotations

import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class ErrorSink(Protocol):
    def on_error(self, path: str, cause: BaseException, message: str) -> None:
        """Receive one failure. Must not raise."""
        ...


class LoggingErrorSink:
    """Default sink: writes every failure to a logger at ERROR level."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def on_error(self, path: str, cause: BaseException, message: str) -> None:
        self._log.error(
            f"Error processing file {path}: {message}",
            exc_info=(type(cause), cause, cause.__traceback__),
        )


class CallbackErrorSink:
    """Adapts a plain `fn(path, cause, message)` callable to the sink protocol."""

    def __init__(self, fn: Callable[[str, BaseException, str], None]) -> None:
        self._fn = fn

    def on_error(self, path: str, cause: BaseException, message: str) -> None:
        self._fn(path, cause, message)


def notify(sink: ErrorSink, path: str, cause: BaseException, message: str) -> None:
    """Deliver to `sink`, logging instead of propagating if the sink misbehaves."""
    try:
        sink.on_error(path, cause, message)
    except Exception:
        logger.exception(f"Error sink {type(sink).__name__} raised while reporting {path}")
