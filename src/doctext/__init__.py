"""doctext: plain-text extraction from heterogeneous documents.

Pluggable format extractors behind a most-recent-wins registry, lazy
directory walking, and a bounded-concurrency batch pipeline that streams
results in completion order.

Public API:
- TextExtractionService
- BatchExtractionPipeline
- ExtractorRegistry / Extractor
- DirectoryWalker
- ExtractionOptions / ErrorPolicy
- ExtractionResult / ErrorKind
- CancellationToken
"""

from .cancellation import CancellationToken
from .config import ErrorPolicy, ExtractionOptions, load_options
from .errors import (
    AccessError,
    DecodeError,
    DoctextError,
    ExtractionCancelled,
    ExtractionError,
    FileMissingError,
    UnsupportedFormatError,
)
from .extractors.base import Extractor, ExtractorRegistry, SuffixExtractor
from .models import ErrorKind, ExtractionResult
from .pipeline.batch import BatchExtractionPipeline
from .service import TextExtractionService
from .sinks import CallbackErrorSink, ErrorSink, LoggingErrorSink
from .walker import DirectoryWalker

__all__ = [
    "AccessError",
    "BatchExtractionPipeline",
    "CallbackErrorSink",
    "CancellationToken",
    "DecodeError",
    "DirectoryWalker",
    "DoctextError",
    "ErrorKind",
    "ErrorPolicy",
    "ErrorSink",
    "ExtractionCancelled",
    "ExtractionError",
    "ExtractionOptions",
    "ExtractionResult",
    "Extractor",
    "ExtractorRegistry",
    "FileMissingError",
    "LoggingErrorSink",
    "SuffixExtractor",
    "TextExtractionService",
    "UnsupportedFormatError",
    "load_options",
]
