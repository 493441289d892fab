# 📦 product_scraper/domain/metadata/__init__.py
"""
📦 Доменний шар метаданих товару.

🔹 Сутності запиту/результату та контракти fetcher/render-фолбеку.
"""

from .entities import (
    ExtractionRequest,
    FetchFailure,
    FetchOutcome,
    FetchResult,
    ProductMetadata,
    SourceStrategy,
)
from .interfaces import IPageFetcher, IRenderFallback

__all__ = [
    "ExtractionRequest",
    "FetchFailure",
    "FetchOutcome",
    "FetchResult",
    "ProductMetadata",
    "SourceStrategy",
    "IPageFetcher",
    "IRenderFallback",
]
