from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import openpyxl

from ..cancellation import CancellationToken
from ..errors import DecodeError
from .base import SuffixExtractor


@dataclass
class XlsxExtractor(SuffixExtractor):
    name = "xlsx"
    supported_suffixes = (".xlsx", ".xlsm")

    def extract(self, path: Path, cancel: CancellationToken) -> str:
        """Extract every worksheet as tab-separated rows.

        Each sheet starts with a `=== Worksheet: <title> ===` header; rows
        whose cells are all empty are skipped. Cancellation is checked per sheet.
        """
        cancel.raise_if_cancelled()
        try:
            wb = openpyxl.load_workbook(str(path), read_only=True, data_only=True)
        except OSError:
            raise
        except Exception as e:
            raise DecodeError(str(path), f"Failed to extract text from workbook {path}: {e}", e) from e

        out: list[str] = []
        try:
            for ws in wb.worksheets:
                cancel.raise_if_cancelled()
                out.append(f"=== Worksheet: {ws.title} ===")
                for row in ws.iter_rows(values_only=True):
                    row_vals = ["" if v is None else str(v) for v in row]
                    if any(v.strip() for v in row_vals):
                        out.append("\t".join(row_vals))
                out.append("")
        finally:
            wb.close()
        return "\n".join(out).strip()
