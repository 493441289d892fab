# 🛍️ product_scraper/services/__init__.py
"""🛍️ Сервісний шар: фасад `ExtractionEngine` і фабрика `build_engine`."""

from .extraction_engine import ExtractionEngine, build_engine

__all__ = ["ExtractionEngine", "build_engine"]
