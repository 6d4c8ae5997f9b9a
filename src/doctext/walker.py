"""Lazy directory traversal with depth and recursion control."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from .cancellation import CancellationToken
from .errors import AccessError, ExtractionError, FileMissingError
from .sinks import ErrorSink, LoggingErrorSink, notify

logger = logging.getLogger(__name__)


@dataclass
class DirectoryWalker:
    """Yields absolute paths of every regular file under a root.

    Depth 0 is the files directly inside the root. With `recursive=True` a
    subdirectory found at depth `d` is entered only while `d < max_depth`
    (`max_depth=None` means no limit). Each level yields its files before
    descending into its subdirectories; sibling order is whatever the
    platform returns.

    A directory that cannot be listed is reported to the error sink. With
    `fail_fast` the walk then raises the AccessError or FileMissingError;
    otherwise that directory contributes nothing and the walk continues.
    Symlinked directories are not followed.
    """

    error_sink: ErrorSink = field(default_factory=LoggingErrorSink)
    fail_fast: bool = False

    def walk(
        self,
        root: str | os.PathLike[str],
        max_depth: int | None = None,
        recursive: bool = True,
        cancel: CancellationToken | None = None,
    ) -> Iterator[str]:
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"Invalid max_depth: {max_depth}. Must be >= 0.")
        root_path = Path(root).resolve()
        if not root_path.is_dir():
            self._report(FileMissingError(str(root_path), f"Directory not found: {root_path}"))
            return
        yield from self._walk_dir(root_path, 0, max_depth, recursive, cancel)

    def walk_many(
        self,
        roots: Iterable[str | os.PathLike[str]],
        max_depth: int | None = None,
        recursive: bool = True,
        cancel: CancellationToken | None = None,
    ) -> Iterator[str]:
        for root in roots:
            yield from self.walk(root, max_depth=max_depth, recursive=recursive, cancel=cancel)

    def _walk_dir(
        self,
        directory: Path,
        depth: int,
        max_depth: int | None,
        recursive: bool,
        cancel: CancellationToken | None,
    ) -> Iterator[str]:
        if cancel is not None:
            cancel.raise_if_cancelled()

        subdirs: list[Path] = []
        try:
            with os.scandir(directory) as entries:
                files: list[str] = []
                for entry in entries:
                    if entry.is_dir(follow_symlinks=False):
                        subdirs.append(Path(entry.path))
                    elif entry.is_file():
                        files.append(entry.path)
        except OSError as e:
            err = FileMissingError if isinstance(e, FileNotFoundError) else AccessError
            self._report(err(str(directory), f"Error accessing directory {directory}: {e}", e))
            return

        yield from files

        if not recursive or (max_depth is not None and depth >= max_depth):
            return
        for sub in subdirs:
            yield from self._walk_dir(sub, depth + 1, max_depth, recursive, cancel)

    def _report(self, error: ExtractionError) -> None:
        notify(self.error_sink, error.path, error.cause or error, error.message)
        if self.fail_fast:
            raise error
