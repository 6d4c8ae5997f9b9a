from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .errors import ExtractionError


class ErrorKind(Enum):
    """Why a file produced a failed result."""

    UNSUPPORTED = "unsupported"
    NOT_FOUND = "not_found"
    DECODE_FAILURE = "decode_failure"
    ACCESS_FAILURE = "access_failure"


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one attempted file.

    Created once by the pipeline and handed to the consumer; never mutated.
    `path` is always absolute.
    """

    path: str
    text: str = ""
    succeeded: bool = True
    error_message: str | None = None
    error_kind: ErrorKind | None = None
    extractor: str | None = None

    @property
    def extension(self) -> str:
        return PurePath(self.path).suffix.lower()

    @property
    def file_name(self) -> str:
        return PurePath(self.path).name

    @classmethod
    def success(cls, path: str, text: str, extractor: str | None = None) -> "ExtractionResult":
        return cls(path=path, text=text, succeeded=True, extractor=extractor)

    @classmethod
    def failure(cls, path: str, error: "ExtractionError", extractor: str | None = None) -> "ExtractionResult":
        return cls(
            path=path,
            text="",
            succeeded=False,
            error_message=error.message,
            error_kind=error.kind,
            extractor=extractor,
        )
