# 🛍️ product_scraper/__init__.py
"""
🛍️ product_scraper — best-effort витягування метаданих товару за URL.

🔹 `ExtractionEngine.extract(url)` → `ProductMetadata` (назва, ціна, зображення, домен, опис).
🔹 `build_engine()` збирає рушій із `ConfigService`.
"""

from product_scraper.domain.metadata.entities import ProductMetadata, SourceStrategy
from product_scraper.services.extraction_engine import ExtractionEngine, build_engine
from product_scraper.shared.errors import InvalidUrlError

__version__ = "1.0.0"

__all__ = [
    "ExtractionEngine",
    "build_engine",
    "ProductMetadata",
    "SourceStrategy",
    "InvalidUrlError",
]
