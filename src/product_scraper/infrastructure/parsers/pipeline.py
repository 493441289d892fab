# 🧠 product_scraper/infrastructure/parsers/pipeline.py
"""
🧠 ExtractionPipeline — впорядковані ланцюжки екстракторів для кожного поля.

🔹 Ланцюжки будуються один раз із `Selectors` і далі лише читаються.
🔹 Порядок джерел: JSON-LD → meta → CSS-евристики → останній шанс.
🔹 Кожен кандидат проходить через `FieldNormalizer`; відкинутий кандидат передає хід далі.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging	# 🧾 Логування
from dataclasses import dataclass	# 🧱 DTO результату
from decimal import Decimal	# 💰 Ціна
from functools import partial	# 🧩 Привʼязка base_url до нормалізатора зображень
from typing import List, Optional, Tuple	# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from product_scraper.infrastructure.parsers.document import Document
from product_scraper.infrastructure.parsers.extractors import (
    DEFAULT_SELECTORS,
    Extractor,
    Selectors,
    description_from_json_ld,
    first_match,
    image_dom_chain,
    image_from_json_ld,
    meta_chain,
    price_css_chain,
    price_from_json_ld,
    title_css_chain,
    title_from_document_title,
    title_from_json_ld,
)
from product_scraper.infrastructure.parsers.normalizer import FieldNormalizer
from product_scraper.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.parser.pipeline")


# ================================
# 📦 РЕЗУЛЬТАТ
# ================================
@dataclass(frozen=True, slots=True)
class ExtractedFields:
    """Нормалізовані поля однієї сторінки; відсутні поля = `""`/None."""

    title: str = ""
    price: Optional[Decimal] = None
    image_url: Optional[str] = None
    description: str = ""


# ================================
# 🧠 ПАЙПЛАЙН
# ================================
class ExtractionPipeline:
    """Набір ланцюжків екстракторів поверх іммутабельних правил."""

    def __init__(self, selectors: Selectors = DEFAULT_SELECTORS, normalizer: Optional[FieldNormalizer] = None) -> None:
        self.selectors = selectors
        self.normalizer = normalizer or FieldNormalizer()
        self.title_chain: Tuple[Extractor, ...] = (
            title_from_json_ld,
            *meta_chain(selectors.TITLE_META),
            *title_css_chain(selectors.TITLE_CSS),
            title_from_document_title,
        )
        self.price_chain: Tuple[Extractor, ...] = (
            price_from_json_ld,
            *meta_chain(selectors.PRICE_META),
            *price_css_chain(selectors.PRICE_CSS, selectors.PRICE_ATTRS),
        )
        self.image_chain: Tuple[Extractor, ...] = (
            image_from_json_ld,
            *meta_chain(selectors.IMAGE_META),
            *image_dom_chain(selectors),
        )
        self.description_chain: Tuple[Extractor, ...] = (
            description_from_json_ld,
            *meta_chain(selectors.DESCRIPTION_META, raw=True),
        )
        logger.debug(
            "🧠 Pipeline: title=%d price=%d image=%d description=%d екстракторів",
            len(self.title_chain),
            len(self.price_chain),
            len(self.image_chain),
            len(self.description_chain),
        )

    # ================================
    # 🏷️ ПОЛЯ
    # ================================
    def extract_title(self, document: Document) -> str:
        return first_match(self.title_chain, document, self.normalizer.title) or ""

    def extract_price(self, document: Document) -> Optional[Decimal]:
        return first_match(self.price_chain, document, self.normalizer.price)

    def extract_image(self, document: Document, base_url: Optional[str] = None) -> Optional[str]:
        return first_match(self.image_chain, document, partial(self.normalizer.image, base_url=base_url))

    def extract_description(self, document: Document) -> str:
        return first_match(self.description_chain, document, self.normalizer.description) or ""

    def extract_all(self, document: Document, base_url: Optional[str] = None) -> ExtractedFields:
        """Усі поля одразу; кожне поле незалежне від інших."""
        fields = ExtractedFields(
            title=self.extract_title(document),
            price=self.extract_price(document),
            image_url=self.extract_image(document, base_url),
            description=self.extract_description(document),
        )
        missing: List[str] = [name for name in ("title", "price", "image_url", "description") if getattr(fields, name) in (None, "")]
        if missing:
            logger.debug("🪣 Не знайдено полів: %s", ", ".join(missing))
        return fields


__all__ = ["ExtractionPipeline", "ExtractedFields"]
