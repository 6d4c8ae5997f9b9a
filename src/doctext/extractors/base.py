from __future__ import annotations

from pathlib import Path
from typing import Iterator, Protocol, runtime_checkable

from ..cancellation import CancellationToken
from ..utils import has_suffix


@runtime_checkable
class Extractor(Protocol):
    """Anything that can claim a file and turn it into text.

    `can_handle` must be pure and cheap; `extract` may raise (the pipeline
    classifies the exception) and should poll `cancel` between coarse units
    of work.
    """

    name: str

    def can_handle(self, path: Path) -> bool:
        ...

    def extract(self, path: Path, cancel: CancellationToken) -> str:
        ...


class SuffixExtractor:
    """Base for extractors that claim files purely by suffix."""

    name = "suffix"
    supported_suffixes: tuple[str, ...] = ()

    def can_handle(self, path: Path) -> bool:
        return has_suffix(Path(path), frozenset(s.lower() for s in self.supported_suffixes))

    def extract(self, path: Path, cancel: CancellationToken) -> str:
        raise NotImplementedError


class ExtractorRegistry:
    """Append-only list of extractors; later registrations win ties.

    Registration is meant to finish before a pipeline starts pulling files.
    Registering while another thread resolves is not synchronised.
    """

    def __init__(self) -> None:
        self._extractors: list[Extractor] = []

    def register(self, extractor: Extractor) -> None:
        self._extractors.append(extractor)

    def resolve(self, path: str | Path) -> Extractor | None:
        """Most recently registered extractor whose `can_handle` accepts `path`.

        Exceptions raised by `can_handle` propagate to the caller.
        """
        p = Path(path)
        for extractor in reversed(self._extractors):
            if extractor.can_handle(p):
                return extractor
        return None

    def supports(self, path: str | Path) -> bool:
        return self.resolve(path) is not None

    @property
    def extractors(self) -> tuple[Extractor, ...]:
        """Snapshot in registration order."""
        return tuple(self._extractors)

    def __len__(self) -> int:
        return len(self._extractors)

    def __iter__(self) -> Iterator[Extractor]:
        return iter(self.extractors)
