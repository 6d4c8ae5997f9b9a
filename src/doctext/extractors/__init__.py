"""Format extractors and the registry that chooses between them."""

from .base import Extractor, ExtractorRegistry, SuffixExtractor
from .docx import DocxExtractor
from .html import HtmlExtractor
from .markdown import MarkdownExtractor
from .pdf import PdfExtractor
from .plain_text import FallbackPlainTextExtractor, PlainTextExtractor
from .pptx import PptxExtractor
from .xlsx import XlsxExtractor

__all__ = [
    "Extractor",
    "ExtractorRegistry",
    "SuffixExtractor",
    "DocxExtractor",
    "FallbackPlainTextExtractor",
    "HtmlExtractor",
    "MarkdownExtractor",
    "PdfExtractor",
    "PlainTextExtractor",
    "PptxExtractor",
    "XlsxExtractor",
]
