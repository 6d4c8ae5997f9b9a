from .batch import BatchExtractionPipeline
from .limiter import ConcurrencyLimiter

__all__ = ["BatchExtractionPipeline", "ConcurrencyLimiter"]
