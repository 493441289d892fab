# 🧾 product_scraper/infrastructure/parsers/extractors/base.py
"""
🧾 Спільні абстракції екстракторів.

🔹 `Selectors` — іммутабельний набір правил (CSS-селектори, meta-ключі, атрибути, блок-листи).
🔹 `Extractor` — чиста функція `Document -> Optional[str]`.
🔹 `first_match` — комбінатор «перший прийнятий кандидат» для впорядкованих ланцюжків.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import json	# 🧾 Десеріалізація JSON-LD
import logging	# 🧾 Логування подій
from dataclasses import dataclass, fields, replace	# 🧱 Створення датакласів
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar	# 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from product_scraper.infrastructure.parsers.document import Document	# 🥣 DOM-адаптер
from product_scraper.shared.utils.logger import LOG_NAME	# 🏷️ Базова назва логера

# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.parser.extractor")	# 🧾 Логер для екстракторів парсера

T = TypeVar("T")
Extractor = Callable[[Document], Optional[str]]	# 🧩 Один спосіб знайти кандидата


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def as_list(x: Any) -> List[Any]:
    """Гарантує отримання списку елементів."""
    if x is None:
        return []
    if isinstance(x, list):
        return x
    return [x]


def try_json_loads(raw: str) -> Optional[Any]:
    """Безпечно десеріалізує JSON, повертаючи None у разі помилок."""
    raw_clean = (raw or "").strip()
    if not raw_clean:
        return None
    try:
        return json.loads(raw_clean)
    except ValueError as exc:	# ⚠️ Некоректний формат JSON (JSONDecodeError ⊂ ValueError)
        logger.debug("🐛 Помилка декодування JSON: %s", exc)
        return None


def first_match(
    extractors: Iterable[Callable[[Document], Optional[str]]],
    document: Document,
    accept: Callable[[str], Optional[T]],
) -> Optional[T]:
    """
    Запускає екстрактори по черзі й повертає перший кандидат, прийнятий `accept`.

    Відкинутий нормалізатором кандидат не зупиняє ланцюжок: керування переходить
    до наступного екстрактора. Виняток усередині екстрактора = «не знайдено».
    """
    for extractor in extractors:
        try:
            candidate = extractor(document)
        except Exception:	# noqa: BLE001
            logger.debug("🐛 Екстрактор %s впав", getattr(extractor, "__name__", extractor), exc_info=True)
            continue
        if not candidate:
            continue
        value = accept(candidate)
        if value is not None:
            logger.debug("✅ %s → %r", getattr(extractor, "__name__", extractor), value)
            return value
    return None


# ================================
# 📦 ПРАВИЛА ВИБІРКИ
# ================================
@dataclass(frozen=True, slots=True)
class Selectors:
    """Іммутабельні правила; належать екземпляру рушія, не глобальному стану."""

    TITLE_META: Tuple[str, ...] = (
        'meta[property="og:title"]',
        'meta[name="twitter:title"]',
        'meta[name="title"]',
    )
    TITLE_CSS: Tuple[str, ...] = (
        '[data-testid="product-title"]',
        '[data-automation="product-title"]',
        ".product-title",
        ".product-name",
        ".product__title",
        "#productTitle",
        '[itemprop="name"]',
        "h1.title",
        'h1[class*="product"]',
        'h1[class*="Product"]',
        ".pdp-title",
        ".item-title",
        "h1",
    )
    PRICE_META: Tuple[str, ...] = (
        'meta[property="product:price:amount"]',
        'meta[property="og:price:amount"]',
        'meta[name="price"]',
        'meta[itemprop="price"]',
    )
    PRICE_CSS: Tuple[str, ...] = (
        '[data-testid="current-price"]',
        '[data-automation="product-price"]',
        "[data-price]",
        "[data-product-price]",
        '[itemprop="price"]',
        ".price-current",
        ".price--current",
        ".current-price",
        ".sale-price",
        ".offer-price",
        ".product-price",
        ".product__price",
        ".Price",
        ".price",
        "#priceblock_ourprice",
        "#priceblock_dealprice",
        "#priceblock_saleprice",
        ".a-price .a-offscreen",
        '[class*="ProductPrice"]',
        '[class*="product-price"]',
        '[class*="currentPrice"]',
        '[class*="sale-price"]',
        ".pdp-price",
        ".item-price",
        'span[class*="price"]',
        'div[class*="price"]',
    )
    PRICE_ATTRS: Tuple[str, ...] = ("content", "data-price", "data-product-price")
    IMAGE_META: Tuple[str, ...] = (
        'meta[property="og:image"]',
        'meta[property="og:image:secure_url"]',
        'meta[name="twitter:image"]',
        'meta[name="twitter:image:src"]',
        'meta[itemprop="image"]',
    )
    IMAGE_CSS: Tuple[str, ...] = (
        '[data-testid="product-image"] img',
        '[data-automation="product-image"] img',
        ".product-image img",
        ".product__image img",
        "#product-image img",
        "#main-image",
        '[itemprop="image"]',
        ".pdp-image img",
        ".gallery-image img",
        ".primary-image",
        '[class*="ProductImage"] img',
        '[class*="product-image"] img',
        ".slick-current img",
        ".selected img",
        "[data-zoom-image]",
        'img[class*="product"]',
        'img[class*="Product"]',
        ".product-gallery img",
        ".product-single__photo img",
        ".product-featured-img",
        "[data-main-image]",
        ".product-media img",
        ".woocommerce-product-gallery__image img",
        ".ProductItem__Image img",
        ".product_image img",
        "[data-image-large]",
        ".carousel-inner img",
        ".swiper-slide-active img",
        ".main-product-image img",
    )
    IMAGE_ATTRS: Tuple[str, ...] = (
        "src",
        "data-src",
        "data-zoom-image",
        "data-large",
        "data-image-large",
        "data-lazy-src",
        "data-original",
    )
    SRCSET_ATTRS: Tuple[str, ...] = ("srcset", "data-srcset")
    IMAGE_PLACEHOLDER_MARKERS: Tuple[str, ...] = ("placeholder", "loading", "spinner")
    IMAGE_SCAN_BLOCKLIST: Tuple[str, ...] = ("logo", "icon", "placeholder", "avatar", "banner")
    IMAGE_SCAN_MIN_SIZE: int = 200
    DESCRIPTION_META: Tuple[str, ...] = (
        'meta[property="og:description"]',
        'meta[name="description"]',
    )

    def with_overrides(self, overrides: Optional[Mapping[str, Any]]) -> "Selectors":
        """🔀 Нова копія з перевизначеними полями (невідомі ключі ігноруються)."""
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        changes: dict = {}
        for key, value in overrides.items():
            name = str(key).upper()
            if name not in known or value is None:
                logger.debug("🔍 Пропускаємо невідомий ключ селекторів: %s", key)
                continue
            if name == "IMAGE_SCAN_MIN_SIZE":
                changes[name] = int(value)
            else:
                changes[name] = tuple(str(v) for v in as_list(value) if str(v).strip())
        return replace(self, **changes) if changes else self


DEFAULT_SELECTORS = Selectors()


def css_chain(selectors: Sequence[str], read: Callable[[Document, str], Optional[str]]) -> List[Extractor]:
    """Один екстрактор на кожен селектор (порядок = пріоритет)."""

    def _make(selector: str) -> Extractor:
        def _extract(document: Document) -> Optional[str]:
            return read(document, selector)

        _extract.__name__ = f"css[{selector}]"
        return _extract

    return [_make(selector) for selector in selectors]


__all__ = [
    "Extractor",
    "Selectors",
    "DEFAULT_SELECTORS",
    "first_match",
    "css_chain",
    "as_list",
    "try_json_loads",
    "logger",
]
