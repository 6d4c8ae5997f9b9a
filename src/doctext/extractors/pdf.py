from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pdfplumber

from ..cancellation import CancellationToken
from ..errors import DecodeError, ExtractionCancelled
from .base import SuffixExtractor


@dataclass
class PdfExtractor(SuffixExtractor):
    name = "pdf"
    supported_suffixes = (".pdf",)

    def extract(self, path: Path, cancel: CancellationToken) -> str:
        """Extract PDF text page by page.

        Blank pages are skipped; non-blank pages are separated by an empty
        line. Cancellation is checked before each page.
        """
        pages: list[str] = []
        try:
            with pdfplumber.open(str(path)) as pdf:
                for page in pdf.pages:
                    cancel.raise_if_cancelled()
                    t = page.extract_text() or ""
                    if t.strip():
                        pages.append(t)
        except (ExtractionCancelled, OSError):
            raise
        except Exception as e:
            raise DecodeError(str(path), f"Failed to extract text from PDF {path}: {e}", e) from e

        return "\n\n".join(pages).strip()
