# 🎯 product_scraper/infrastructure/parsers/extractors/css.py
"""
🎯 Евристичні CSS-екстрактори для назви та ціни.

🔹 Фіксований пріоритет селекторів: перший елемент, що дав непорожній прийнятий кандидат, перемагає.
🔹 Ціна читається з атрибутів (`content`, `data-price`, `data-product-price`), далі з тексту.
🔹 Останній шанс для назви — текст `<title>`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import List, Optional, Sequence	# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from product_scraper.infrastructure.parsers.document import Document
from .base import Extractor, css_chain


def _element_text(document: Document, selector: str) -> Optional[str]:
    return document.text(selector)


def title_css_chain(selectors: Sequence[str]) -> List[Extractor]:
    """🏷️ Текст першого елемента для кожного селектора назви."""
    return css_chain(selectors, _element_text)


def title_from_document_title(document: Document) -> Optional[str]:
    """🏷️ Текст `<title>` (найменш надійне джерело)."""
    return document.title_text()


def price_css_chain(selectors: Sequence[str], attrs: Sequence[str]) -> List[Extractor]:
    """💰 Для кожного селектора: атрибути з `attrs`, далі текст елемента."""
    attr_names = tuple(attrs)

    def _read(document: Document, selector: str) -> Optional[str]:
        node = document.select_one(selector)
        if node is None:
            return None
        return Document.node_attr(node, *attr_names) or Document.node_text(node) or None

    return css_chain(selectors, _read)


__all__ = ["title_css_chain", "title_from_document_title", "price_css_chain"]
