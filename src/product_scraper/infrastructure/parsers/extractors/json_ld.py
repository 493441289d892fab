# 🧾 product_scraper/infrastructure/parsers/extractors/json_ld.py
"""
🧾 Екстрактори структурованих даних (JSON-LD `schema.org/Product`).

🔹 Збирає усі JSON-LD скрипти сторінки, розгортає списки та `@graph`.
🔹 Фільтрує лише обʼєкти `Product` (`@type` рядок або список, без урахування регістру).
🔹 Повертає сирі кандидати: назву, ціну з `offers`, зображення, опис.
🔹 Зламаний JSON мовчки пропускається.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Any, Dict, Iterator, List, Optional	# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from product_scraper.infrastructure.parsers.document import Document, norm_ws
from .base import as_list, logger, try_json_loads

_PRICE_KEYS = ("price", "lowPrice", "highPrice")	# 💰 Порядок пошуку ціни в offer


# ================================
# 📄 БЛОКИ JSON-LD
# ================================
def _iter_nodes(obj: Any) -> Iterator[Dict[str, Any]]:
    """Розгортає списки та `@graph` у плоский потік обʼєктів."""
    for item in as_list(obj):
        if not isinstance(item, dict):
            continue
        graph = item.get("@graph")
        if isinstance(graph, (list, dict)):
            yield from _iter_nodes(graph)
        yield item


def _is_product(node: Dict[str, Any]) -> bool:
    return any(str(t).strip().lower() == "product" for t in as_list(node.get("@type")))


def json_ld_products(document: Document) -> List[Dict[str, Any]]:
    """📦 Усі `Product`-обʼєкти сторінки в порядку документа."""
    products: List[Dict[str, Any]] = []
    for raw in document.json_ld_payloads():
        data = try_json_loads(raw)
        if data is None:	# 🚫 Некоректний JSON
            continue
        products.extend(node for node in _iter_nodes(data) if _is_product(node))
    logger.debug("📦 JSON-LD: знайдено %d product-обʼєктів.", len(products))
    return products


# ================================
# 🧰 ХЕЛПЕРИ ЗНАЧЕНЬ
# ================================
def _text_value(value: Any, raw: bool = False) -> Optional[str]:
    """Рядок або `{"@value": ...}` → текст."""
    if isinstance(value, dict):
        value = value.get("@value")
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        text = str(value) if raw else norm_ws(str(value))
        return text if text.strip() else None
    return None


def _offer_price(offer: Any) -> Optional[str]:
    """Ціна з одного offer (`price`, `lowPrice`, `highPrice`, `priceSpecification`, вкладені offers)."""
    if not isinstance(offer, dict):
        return None
    for key in _PRICE_KEYS:
        value = _text_value(offer.get(key))
        if value:
            return value
    for spec in as_list(offer.get("priceSpecification")):
        value = _offer_price(spec)
        if value:
            return value
    nested = offer.get("offers")	# 🧩 AggregateOffer.offers
    if nested is not None and nested is not offer:
        return _offer_price(as_list(nested)[0] if as_list(nested) else None)
    return None


def _image_value(value: Any) -> Optional[str]:
    """Перший елемент списку; для обʼєкта — `url`, інакше `@id`."""
    items = as_list(value)
    if not items:
        return None
    first = items[0]
    if isinstance(first, dict):
        first = first.get("url") or first.get("contentUrl") or first.get("@id")
        if isinstance(first, list):
            first = first[0] if first else None
    return _text_value(first)


# ================================
# 🏷️ ЕКСТРАКТОРИ ПОЛІВ
# ================================
def title_from_json_ld(document: Document) -> Optional[str]:
    """🏷️ `Product.name`."""
    for product in json_ld_products(document):
        name = _text_value(product.get("name"))
        if name:
            return name
    return None


def price_from_json_ld(document: Document) -> Optional[str]:
    """💰 Ціна з `Product.offers` (перший offer, якщо їх список)."""
    for product in json_ld_products(document):
        offers = as_list(product.get("offers"))
        if not offers:
            continue
        value = _offer_price(offers[0])
        if value:
            return value
    return None


def image_from_json_ld(document: Document) -> Optional[str]:
    """🖼️ `Product.image`."""
    for product in json_ld_products(document):
        image = _image_value(product.get("image"))
        if image:
            return image
    return None


def description_from_json_ld(document: Document) -> Optional[str]:
    """📝 `Product.description`."""
    for product in json_ld_products(document):
        description = _text_value(product.get("description"), raw=True)
        if description:
            return description
    return None


__all__ = [
    "json_ld_products",
    "title_from_json_ld",
    "price_from_json_ld",
    "image_from_json_ld",
    "description_from_json_ld",
]
