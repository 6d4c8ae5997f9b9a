from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pptx import Presentation

from ..cancellation import CancellationToken
from ..errors import DecodeError
from .base import SuffixExtractor


@dataclass
class PptxExtractor(SuffixExtractor):
    """PowerPoint slide text, one `=== Slide <n> ===` block per slide."""

    name = "pptx"
    supported_suffixes = (".pptx",)

    def extract(self, path: Path, cancel: CancellationToken) -> str:
        cancel.raise_if_cancelled()
        try:
            prs = Presentation(str(path))
        except OSError:
            raise
        except Exception as e:
            raise DecodeError(str(path), f"Failed to extract text from presentation {path}: {e}", e) from e

        slides_out: list[str] = []
        for idx, slide in enumerate(prs.slides, start=1):
            cancel.raise_if_cancelled()
            parts: list[str] = [f"=== Slide {idx} ==="]
            for shape in slide.shapes:
                if not getattr(shape, "has_text_frame", False):
                    continue
                for paragraph in shape.text_frame.paragraphs:
                    txt = "".join(run.text for run in paragraph.runs)
                    if txt.strip():
                        parts.append(txt)
            slides_out.append("\n".join(parts))
        return "\n\n".join(slides_out)
