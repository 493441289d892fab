# 🧠 product_scraper/infrastructure/parsers/__init__.py
"""
🧠 Пакет розбору HTML сторінки товару.

🔹 `Document` — адаптер BeautifulSoup.
🔹 `ExtractionPipeline` — ланцюжки екстракторів по полях.
🔹 `FieldNormalizer` — фінальна очистка значень.
🔹 `EngineOptions` — конфігурація інфраструктурних опцій.
"""

from __future__ import annotations

# ⚙️ Опції
from ._infra_options import DEFAULT_ENGINE_OPTIONS, EngineOptions

# 🥣 Документ і нормалізація
from .document import Document
from .normalizer import FieldNormalizer

# 🧠 Пайплайн
from .pipeline import ExtractedFields, ExtractionPipeline

__all__ = [
    "DEFAULT_ENGINE_OPTIONS",
    "EngineOptions",
    "Document",
    "FieldNormalizer",
    "ExtractedFields",
    "ExtractionPipeline",
]
