from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import frontmatter

from ..cancellation import CancellationToken
from ..utils import read_text
from .base import SuffixExtractor

logger = logging.getLogger(__name__)


@dataclass
class MarkdownExtractor(SuffixExtractor):
    """Markdown body text with any YAML front matter removed."""

    name = "markdown"
    supported_suffixes = (".md", ".markdown")

    def extract(self, path: Path, cancel: CancellationToken) -> str:
        cancel.raise_if_cancelled()
        raw = read_text(path)
        try:
            post = frontmatter.loads(raw)
        except Exception as e:
            logger.warning(f"Unparseable front matter in {path}, keeping raw text: {e}")
            return raw
        return post.content
