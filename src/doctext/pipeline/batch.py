"""Concurrent batch extraction.

Paths are pulled lazily from the caller's iterable, resolved against the
registry on the consumer's thread, and extracted on a thread pool no wider
than `max_parallelism`. Results are yielded in completion order: there is no
ordering guarantee relative to the input. Callers that need input order
must collect and sort downstream.
"""
from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from ..cancellation import CancellationToken
from ..config import ExtractionOptions
from ..errors import (
    AccessError,
    ExtractionCancelled,
    ExtractionError,
    FileMissingError,
    UnsupportedFormatError,
    classify_error,
)
from ..extractors.base import Extractor, ExtractorRegistry
from ..models import ExtractionResult
from ..sinks import ErrorSink, LoggingErrorSink, notify
from .limiter import ConcurrencyLimiter

logger = logging.getLogger(__name__)

# How long the driver sleeps between cancellation checks while saturated.
_POLL_SECONDS = 0.05


def extractor_name(extractor: Extractor) -> str:
    return getattr(extractor, "name", None) or type(extractor).__name__


@dataclass
class _Outcome:
    """What a worker hands back to the driver thread."""

    path: str
    extractor: str
    text: str = ""
    error: ExtractionError | None = None


class _SlotLease:
    """One acquired limiter slot, released at most once."""

    def __init__(self, limiter: ConcurrencyLimiter) -> None:
        self._limiter = limiter
        self._released = False
        self._lock = threading.Lock()

    def release(self, *_: object) -> None:
        with self._lock:
            if self._released:
                return
            self._released = True
        self._limiter.release()


@dataclass
class RunStats:
    succeeded: int = 0
    failed: int = 0
    started: float = 0.0

    def record(self, result: ExtractionResult) -> ExtractionResult:
        if result.succeeded:
            self.succeeded += 1
        else:
            self.failed += 1
        return result


class BatchExtractionPipeline:
    """Drives many extractions concurrently under one parallelism bound.

    The slot counter belongs to the pipeline instance, so two `run` calls
    sharing a pipeline also share its bound.
    """

    def __init__(
        self,
        registry: ExtractorRegistry,
        options: ExtractionOptions | None = None,
        error_sink: ErrorSink | None = None,
    ) -> None:
        self.registry = registry
        self.options = options or ExtractionOptions()
        self.error_sink = error_sink or LoggingErrorSink()
        self._limiter = ConcurrencyLimiter(self.options.max_parallelism)

    @property
    def in_flight(self) -> int:
        """Extractions currently holding a slot."""
        return self._limiter.in_use

    @property
    def available_slots(self) -> int:
        return self._limiter.available

    def run(
        self,
        paths: Iterable[str | os.PathLike[str]],
        cancel: CancellationToken | None = None,
    ) -> Iterator[ExtractionResult]:
        """Extract every path, yielding results as they complete.

        Raises ExtractionCancelled after draining in-flight work once `cancel`
        is observed, and the first ExtractionError under FAIL_FAST.
        """
        caller_token = cancel or CancellationToken()
        # Workers see this token: it follows the caller's and is also
        # cancelled when the consumer closes the run early.
        run_token = CancellationToken(parent=caller_token)
        stats = RunStats(started=time.time())
        executor = ThreadPoolExecutor(
            max_workers=self.options.max_parallelism,
            thread_name_prefix="doctext-extract",
        )
        in_flight: dict[Future, str] = {}
        source = iter(paths)
        source_cancelled = False
        finished = False
        aborted = False

        try:
            while not caller_token.is_cancelled:
                try:
                    raw = next(source)
                except StopIteration:
                    break
                except ExtractionCancelled:
                    source_cancelled = True
                    break

                path = os.path.abspath(os.fspath(raw))
                resolved = self._resolve(path)
                if isinstance(resolved, ExtractionResult):
                    yield stats.record(resolved)
                    continue

                acquired = yield from self._acquire_slot(in_flight, caller_token, stats)
                if not acquired:
                    break
                self._submit(executor, in_flight, path, resolved, run_token)

                ready = [f for f in in_flight if f.done()]
                if ready:
                    yield from self._emit(ready, in_flight, stats)

            while in_flight:
                done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                yield from self._emit(done, in_flight, stats)

            if source_cancelled or caller_token.is_cancelled:
                logger.info(f"Extraction cancelled after {stats.succeeded + stats.failed} files")
                raise ExtractionCancelled("Extraction was cancelled")
            finished = True
        except ExtractionError:
            # In-flight extractions are left to finish; their results are discarded.
            aborted = True
            raise
        finally:
            if not finished and not aborted:
                run_token.cancel()
            executor.shutdown(wait=False, cancel_futures=True)
            elapsed = time.time() - stats.started
            logger.info(
                f"Extraction run {'complete' if finished else 'stopped'}: "
                f"{stats.succeeded} succeeded, {stats.failed} failed in {elapsed:.1f}s"
            )

    def extract_one(self, path: str | os.PathLike[str], cancel: CancellationToken | None = None) -> ExtractionResult:
        """Extract a single file on the calling thread, honouring the slot bound."""
        token = cancel or CancellationToken()
        abs_path = os.path.abspath(os.fspath(path))
        token.raise_if_cancelled()
        resolved = self._resolve(abs_path)
        if isinstance(resolved, ExtractionResult):
            return resolved

        while not self._limiter.acquire(timeout=_POLL_SECONDS):
            token.raise_if_cancelled()
        lease = _SlotLease(self._limiter)
        outcome = self._extract(abs_path, resolved, token, lease)
        return self._finish(outcome)

    def _resolve(self, path: str) -> Extractor | ExtractionResult:
        """Pending -> Resolving. Failures here never take a slot."""
        if not os.path.isfile(path):
            if os.path.exists(path):
                error: ExtractionError = AccessError(path, f"Not a regular file: {path}")
            else:
                error = FileMissingError(path, f"File not found: {path}")
            return self._failed(error)

        try:
            extractor = self.registry.resolve(path)
        except Exception as e:
            return self._failed(classify_error(path, e))

        if extractor is None:
            return self._failed(UnsupportedFormatError(path, f"No extractor available for file: {path}"))
        return extractor

    def _acquire_slot(
        self,
        in_flight: dict[Future, str],
        cancel: CancellationToken,
        stats: RunStats,
    ) -> Iterator[ExtractionResult]:
        """Wait for a free slot, emitting completions meanwhile.

        Generator-returns False if cancellation was observed first.
        """
        while True:
            if cancel.is_cancelled:
                return False
            if self._limiter.try_acquire():
                return True
            if in_flight:
                done, _ = wait(in_flight, timeout=_POLL_SECONDS, return_when=FIRST_COMPLETED)
                if done:
                    yield from self._emit(done, in_flight, stats)
            elif self._limiter.acquire(timeout=_POLL_SECONDS):
                # Slots were held by another run on this pipeline.
                return True

    def _submit(
        self,
        executor: ThreadPoolExecutor,
        in_flight: dict[Future, str],
        path: str,
        extractor: Extractor,
        cancel: CancellationToken,
    ) -> None:
        lease = _SlotLease(self._limiter)
        try:
            future = executor.submit(self._extract, path, extractor, cancel, lease)
        except BaseException:
            lease.release()
            raise
        # Covers futures cancelled before a worker ever picked them up.
        future.add_done_callback(lease.release)
        in_flight[future] = path
        logger.debug(f"Admitted {path} -> {extractor_name(extractor)} ({self._limiter.in_use} in flight)")

    def _extract(self, path: str, extractor: Extractor, cancel: CancellationToken, lease: _SlotLease) -> _Outcome:
        """Extracting -> Succeeded | Failed. Runs on a worker thread."""
        name = extractor_name(extractor)
        try:
            cancel.raise_if_cancelled()
            text = extractor.extract(Path(path), cancel)
            return _Outcome(path=path, extractor=name, text=text or "")
        except ExtractionCancelled as e:
            if cancel.is_cancelled:
                raise
            # Raised by the extractor itself with no cancellation requested.
            return _Outcome(path=path, extractor=name, error=classify_error(path, e))
        except Exception as e:
            return _Outcome(path=path, extractor=name, error=classify_error(path, e))
        finally:
            lease.release()

    def _emit(
        self,
        done: Iterable[Future],
        in_flight: dict[Future, str],
        stats: RunStats,
    ) -> Iterator[ExtractionResult]:
        for future in done:
            path = in_flight.pop(future)
            try:
                outcome = future.result()
            except ExtractionCancelled:
                logger.debug(f"Extraction of {path} stopped by cancellation")
                continue
            yield stats.record(self._finish(outcome))

    def _finish(self, outcome: _Outcome) -> ExtractionResult:
        if outcome.error is None:
            logger.debug(f"Extracted {outcome.path} ({len(outcome.text)} chars)")
            return ExtractionResult.success(outcome.path, outcome.text, extractor=outcome.extractor)
        return self._failed(outcome.error, extractor=outcome.extractor)

    def _failed(self, error: ExtractionError, extractor: str | None = None) -> ExtractionResult:
        """Report a failure, then raise it (FAIL_FAST) or turn it into a result."""
        notify(self.error_sink, error.path, error.cause or error, error.message)
        if self.options.fail_fast:
            raise error
        return ExtractionResult.failure(error.path, error, extractor=extractor)
