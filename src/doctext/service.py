from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .cancellation import CancellationToken
from .config import ExtractionOptions
from .extractors.base import Extractor, ExtractorRegistry
from .extractors.docx import DocxExtractor
from .extractors.html import HtmlExtractor
from .extractors.markdown import MarkdownExtractor
from .extractors.pdf import PdfExtractor
from .extractors.plain_text import FallbackPlainTextExtractor, PlainTextExtractor
from .extractors.pptx import PptxExtractor
from .extractors.xlsx import XlsxExtractor
from .models import ExtractionResult
from .pipeline.batch import BatchExtractionPipeline
from .sinks import ErrorSink, LoggingErrorSink
from .walker import DirectoryWalker

logger = logging.getLogger(__name__)


@dataclass
class TextExtractionService:
    """Default registry, walker and pipeline wired together.

    Defaults are registered lowest priority first. The size-bounded fallback
    goes in before everything so any specialised extractor outranks it, and
    Markdown goes in after plain text so it claims `.md` files. Extractors
    registered later through `register_extractor` outrank all defaults.
    """

    options: ExtractionOptions = field(default_factory=ExtractionOptions)
    error_sink: ErrorSink = field(default_factory=LoggingErrorSink)

    def __post_init__(self) -> None:
        self.registry = ExtractorRegistry()
        self.registry.register(FallbackPlainTextExtractor(max_bytes=self.options.fallback_max_bytes))
        self.registry.register(HtmlExtractor())
        self.registry.register(PdfExtractor())
        self.registry.register(DocxExtractor())
        self.registry.register(XlsxExtractor())
        self.registry.register(PptxExtractor())
        self.registry.register(PlainTextExtractor())
        self.registry.register(MarkdownExtractor())

        self.walker = DirectoryWalker(error_sink=self.error_sink, fail_fast=self.options.fail_fast)
        self.pipeline = BatchExtractionPipeline(self.registry, self.options, self.error_sink)
        logger.debug(f"TextExtractionService initialized with {len(self.registry)} extractors")

    @property
    def registered_extractors(self) -> tuple[Extractor, ...]:
        return self.registry.extractors

    def register_extractor(self, extractor: Extractor) -> None:
        self.registry.register(extractor)

    def read_from_files(
        self,
        paths: Iterable[str | os.PathLike[str]],
        cancel: CancellationToken | None = None,
    ) -> Iterator[ExtractionResult]:
        """Results for `paths`, in completion order."""
        return self.pipeline.run(paths, cancel=cancel)

    def read_from_directory(
        self,
        directory: str | os.PathLike[str],
        max_depth: int | None = None,
        recursive: bool = True,
        cancel: CancellationToken | None = None,
    ) -> Iterator[ExtractionResult]:
        """Walk `directory` and extract files as the walk discovers them."""
        return self.read_from_directories([directory], max_depth=max_depth, recursive=recursive, cancel=cancel)

    def read_from_directories(
        self,
        directories: Iterable[str | os.PathLike[str]],
        max_depth: int | None = None,
        recursive: bool = True,
        cancel: CancellationToken | None = None,
    ) -> Iterator[ExtractionResult]:
        paths = self.walker.walk_many(directories, max_depth=max_depth, recursive=recursive, cancel=cancel)
        return self.pipeline.run(paths, cancel=cancel)

    def read_from_file(self, path: str | os.PathLike[str], cancel: CancellationToken | None = None) -> str:
        """Text of one file; empty string if it failed under CONTINUE_ON_ERROR."""
        return self.pipeline.extract_one(path, cancel=cancel).text
