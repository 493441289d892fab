# 🧩 product_scraper/infrastructure/parsers/extractors/__init__.py
"""
🧩 Екстрактори полів товару: JSON-LD, meta, CSS-евристики, зображення.

🔹 Кожен екстрактор — чиста функція `Document -> Optional[str]`.
🔹 `first_match` поєднує їх у впорядкований ланцюжок.
"""

from .base import DEFAULT_SELECTORS, Extractor, Selectors, css_chain, first_match
from .css import price_css_chain, title_css_chain, title_from_document_title
from .images import image_css_chain, image_dom_chain, image_scan, largest_from_srcset
from .json_ld import (
    description_from_json_ld,
    image_from_json_ld,
    json_ld_products,
    price_from_json_ld,
    title_from_json_ld,
)
from .meta import meta_chain

__all__ = [
    "DEFAULT_SELECTORS",
    "Extractor",
    "Selectors",
    "css_chain",
    "first_match",
    "price_css_chain",
    "title_css_chain",
    "title_from_document_title",
    "image_css_chain",
    "image_dom_chain",
    "image_scan",
    "largest_from_srcset",
    "description_from_json_ld",
    "image_from_json_ld",
    "json_ld_products",
    "price_from_json_ld",
    "title_from_json_ld",
    "meta_chain",
]
