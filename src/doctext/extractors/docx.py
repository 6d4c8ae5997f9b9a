from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from docx import Document as DocxDocument
from docx.table import Table

from ..cancellation import CancellationToken
from ..errors import DecodeError
from .base import SuffixExtractor


@dataclass
class DocxExtractor(SuffixExtractor):
    """Word (.docx) body text in reading order, tables rendered row by row.

    Legacy binary .doc files are not claimed; python-docx cannot read them.
    """

    name = "docx"
    supported_suffixes = (".docx",)

    def extract(self, path: Path, cancel: CancellationToken) -> str:
        cancel.raise_if_cancelled()
        try:
            doc = DocxDocument(str(path))
        except OSError:
            raise
        except Exception as e:
            raise DecodeError(str(path), f"Failed to extract text from Word document {path}: {e}", e) from e

        lines: list[str] = []
        for block in doc.iter_inner_content():
            if isinstance(block, Table):
                cancel.raise_if_cancelled()
                for row in block.rows:
                    cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                    if cells:
                        lines.append(" | ".join(cells))
            elif block.text.strip():
                lines.append(block.text)

        return "\n".join(lines).strip()
