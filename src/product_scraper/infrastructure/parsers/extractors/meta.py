# 🏷️ product_scraper/infrastructure/parsers/extractors/meta.py
"""
🏷️ Екстрактори з meta-тегів (OpenGraph, Twitter Cards, itemprop).

🔹 Один екстрактор на кожен meta-селектор; значення береться з `content`.
🔹 Для опису `raw=True`: переноси та відступи зберігаються як є.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from product_scraper.infrastructure.parsers.document import Document
from .base import Extractor, css_chain


def _meta_content(document: Document, selector: str) -> Optional[str]:
    return document.meta_content(selector)


def _meta_content_raw(document: Document, selector: str) -> Optional[str]:
    return document.meta_content(selector, raw=True)


def meta_chain(selectors: Sequence[str], *, raw: bool = False) -> List[Extractor]:
    """Ланцюжок meta-екстракторів у заданому порядку (`raw` → значення без стискання пробілів)."""
    return css_chain(selectors, _meta_content_raw if raw else _meta_content)


__all__ = ["meta_chain"]
