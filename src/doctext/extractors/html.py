from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from bs4 import BeautifulSoup

from ..cancellation import CancellationToken
from ..utils import read_text
from .base import SuffixExtractor

_WS_RE = re.compile(r"\s+")


def clean_whitespace(text: str) -> str:
    """Collapse runs of whitespace inside each line and drop blank lines."""
    lines = (_WS_RE.sub(" ", line.strip()) for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


@dataclass
class HtmlExtractor(SuffixExtractor):
    """Visible HTML text: scripts and styles removed, entities decoded."""

    name = "html"
    supported_suffixes = (".html", ".htm")

    def extract(self, path: Path, cancel: CancellationToken) -> str:
        cancel.raise_if_cancelled()
        soup = BeautifulSoup(read_text(path), "html.parser")
        for tag in soup(["script", "style"]):
            tag.decompose()
        return clean_whitespace(soup.get_text())
