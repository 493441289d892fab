# 🧽 product_scraper/infrastructure/parsers/normalizer.py
"""
🧽 FieldNormalizer — фінальна очистка кандидатів для кожного поля.

🔹 title: стискаємо пробіли, відрізаємо суфікс магазину (`|`, ` - `, ` – `, ` — `), ліміт 255.
🔹 price: перше число з тексту, без роздільників тисяч, лише в межах (price_min, price_max).
🔹 image: абсолютний http(s) URL без параметрів розміру/якості.
🔹 description: ліміт 500 символів.
🔹 Кожен метод повертає нормалізоване значення або None (кандидат відкинуто).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging	# 🧾 Логування відкинутих кандидатів
import re	# 🧵 Регулярні вирази
from decimal import Decimal, InvalidOperation	# 💰 Точна арифметика цін
from typing import Optional	# 🧰 Типізація
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit	# 🌐 Робота з query

# 🧩 Внутрішні модулі проєкту
from product_scraper.infrastructure.parsers._infra_options import DEFAULT_ENGINE_OPTIONS, EngineOptions
from product_scraper.infrastructure.parsers.document import norm_ws
from product_scraper.shared.utils.logger import LOG_NAME
from product_scraper.shared.utils.url_utils import derive_domain, resolve_url

# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.parser.normalizer")

# ================================
# 📦 КОНСТАНТИ МОДУЛЯ
# ================================
TITLE_SEPARATORS = ("|", " - ", " – ", " — ")	# ✂️ Роздільники «Назва | Магазин»
PRICE_RE = re.compile(r"\$?\s*([\d,]+\.?\d*)")	# 💲 Перше число (з опційним $)
IMAGE_SIZE_PARAMS = frozenset({"w", "h", "width", "height", "size", "quality"})	# 🖼️ Параметри ресайзу CDN


class FieldNormalizer:
    """Нормалізатор полів; межі та ліміти беруться з `EngineOptions`."""

    def __init__(self, options: EngineOptions = DEFAULT_ENGINE_OPTIONS) -> None:
        self._options = options

    # ================================
    # 🏷️ НАЗВА
    # ================================
    def title(self, text: Optional[str]) -> Optional[str]:
        """Повертає очищену назву; повторний виклик нічого не змінює."""
        value = norm_ws(text)
        if not value:
            return None
        cut = min((idx for idx in (value.find(sep) for sep in TITLE_SEPARATORS) if idx >= 0), default=-1)
        if cut >= 0:
            value = value[:cut]	# ✂️ Відкидаємо назву магазину
        value = value.strip()[: self._options.title_max_len].rstrip()
        return value or None

    # ================================
    # 💰 ЦІНА
    # ================================
    def price(self, text: Optional[str]) -> Optional[Decimal]:
        """Перше число з тексту; поза межами діапазону → None (без «підрізання»)."""
        if text is None:
            return None
        match = next((m for m in PRICE_RE.finditer(str(text)) if any(ch.isdigit() for ch in m.group(1))), None)
        if match is None:	# 🪣 Лише коми без цифр не рахуються
            return None
        raw = match.group(1).replace(",", "")
        try:
            value = Decimal(raw)
        except InvalidOperation:
            logger.debug("💸 Некоректна ціна %r", raw)
            return None
        if not value.is_finite() or not (self._options.price_min < value < self._options.price_max):
            logger.debug("💸 Ціна %s поза межами (%s, %s) → відкинуто", value, self._options.price_min, self._options.price_max)
            return None
        return value

    # ================================
    # 🖼️ ЗОБРАЖЕННЯ
    # ================================
    def image(self, url: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
        """Абсолютний http(s) URL без `w/h/width/height/size/quality`; інші параметри зберігаються."""
        absolute = resolve_url(url, base_url)
        if absolute is None:
            return None
        try:
            parts = urlsplit(absolute)
        except ValueError:
            return None
        if parts.query:
            kept = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k.lower() not in IMAGE_SIZE_PARAMS]
            parts = parts._replace(query=urlencode(kept))
        return urlunsplit(parts)

    # ================================
    # 📝 ОПИС
    # ================================
    def description(self, text: Optional[str]) -> Optional[str]:
        """Обрізаний до ліміту опис; порожній → None."""
        value = (text or "").strip()
        if not value:
            return None
        return value[: self._options.description_max_len].rstrip() or None

    # ================================
    # 🌐 ДОМЕН
    # ================================
    @staticmethod
    def domain(url: str) -> str:
        return derive_domain(url)


__all__ = ["FieldNormalizer", "TITLE_SEPARATORS", "IMAGE_SIZE_PARAMS", "PRICE_RE"]
