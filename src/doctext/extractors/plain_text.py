from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..cancellation import CancellationToken
from ..config import DEFAULT_FALLBACK_MAX_BYTES
from ..utils import read_text
from .base import SuffixExtractor

TEXT_SUFFIXES = (
    ".txt", ".log", ".csv", ".tsv", ".json", ".xml", ".md", ".markdown",
    ".yml", ".yaml", ".ini", ".cfg", ".config", ".env", ".gitignore",
    ".cs", ".js", ".ts", ".py", ".java", ".cpp", ".c", ".h", ".sql",
    ".ps1", ".bat", ".sh", ".properties",
)


@dataclass
class PlainTextExtractor(SuffixExtractor):
    """Known text formats, decoded with charset detection."""

    name = "plain_text"
    supported_suffixes = TEXT_SUFFIXES

    def extract(self, path: Path, cancel: CancellationToken) -> str:
        cancel.raise_if_cancelled()
        return read_text(path)


@dataclass
class FallbackPlainTextExtractor:
    """Reads any small file as text.

    Registered first so every specialised extractor outranks it; it only
    catches files nothing else claims.
    """

    max_bytes: int = DEFAULT_FALLBACK_MAX_BYTES
    name = "fallback_plain_text"

    def can_handle(self, path: Path) -> bool:
        p = Path(path)
        try:
            return p.is_file() and p.stat().st_size < self.max_bytes
        except OSError:
            return False

    def extract(self, path: Path, cancel: CancellationToken) -> str:
        cancel.raise_if_cancelled()
        return read_text(path)
