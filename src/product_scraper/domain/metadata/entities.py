# 📦 product_scraper/domain/metadata/entities.py
"""
📦 Доменні сутності рушія витягування метаданих товару.

🔹 `ExtractionRequest` — валідований вхід (URL + дедлайн).
🔹 `FetchResult` / `FetchFailure` — результат отримання HTML (union `FetchOutcome`).
🔹 `ProductMetadata` — best-effort запис (назва, ціна, зображення, домен, опис).
🔹 Усі сутності іммʼютабельні (frozen dataclass); ціна — `Decimal`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логування валідації
from dataclasses import dataclass                                   # 🧱 Опис сутностей
from decimal import Decimal                                         # 💰 Фінансові значення
from enum import Enum                                               # 🔖 Переліки
from typing import Any, Dict, Optional, Union                       # 🧰 Типізація
from urllib.parse import urlsplit                                   # 🌐 Перевірка URL

# 🧩 Внутрішні модулі проєкту
from product_scraper.shared.errors import FailureReason, InvalidUrlError
from product_scraper.shared.utils.url_utils import derive_domain

# ================================
# 🪵 ЛОГЕР МОДУЛЯ
# ================================
logger = logging.getLogger(__name__)                                # 🧾 Модульний логер domain-level


# ================================
# 🔖 ДОМЕННІ ТИПИ
# ================================
class SourceStrategy(str, Enum):
    """Звідки отримано HTML для запису."""

    DIRECT_FETCH = "direct_fetch"                                   # 🌐 Пряме завантаження
    REMOTE_RENDER = "remote_render"                                 # 🛰️ Віддалений рендер


# ================================
# 📨 ЗАПИТ
# ================================
@dataclass(frozen=True, slots=True)
class ExtractionRequest:
    """
    Вхід рушія: абсолютний URL товару та опційний дедлайн (секунди).

    Raises:
        InvalidUrlError: URL без схеми або без хоста.
    """

    url: str                                                        # 🔗 Що розбирати
    deadline: Optional[float] = None                                # ⏳ Верхня межа на весь виклик

    def __post_init__(self) -> None:
        if not isinstance(self.url, str):
            raise InvalidUrlError(self.url, details="url must be a string")
        normalized = self.url.strip()
        try:
            parts = urlsplit(normalized)
            host = parts.hostname
        except ValueError as exc:
            raise InvalidUrlError(self.url, details=str(exc)) from exc
        if not parts.scheme or not host:
            logger.debug("❌ ExtractionRequest: %r без схеми/хоста", normalized)
            raise InvalidUrlError(self.url, details="missing scheme or host")
        if self.deadline is not None and self.deadline <= 0:
            raise ValueError("deadline must be > 0")
        object.__setattr__(self, "url", normalized)                 # 🔐 Фіксуємо нормалізоване значення

    @property
    def domain(self) -> str:
        """🌐 Хост без `www.`."""
        return derive_domain(self.url)


# ================================
# 📥 РЕЗУЛЬТАТИ ЗАВАНТАЖЕННЯ
# ================================
@dataclass(frozen=True, slots=True)
class FetchResult:
    """Отриманий HTML і стратегія, що його дала. Живе лише в межах одного виклику."""

    html: str
    source_strategy: SourceStrategy
    http_status: Optional[int] = None                               # 🔢 None для віддаленого рендеру
    final_url: Optional[str] = None                                 # 🧭 URL після редіректів
    profile: Optional[str] = None                                   # 🕵️ Імʼя профілю, що спрацював


@dataclass(frozen=True, slots=True)
class FetchFailure:
    """Жоден профіль не повернув 200."""

    reason: FailureReason
    http_status: Optional[int] = None                               # 🔢 Останній отриманий статус
    attempts: int = 0                                               # 🔁 Скільки профілів випробувано
    detail: str = ""


FetchOutcome = Union[FetchResult, FetchFailure]                     # 🔀 Результат Fetcher


# ================================
# 🛍️ РЕЗУЛЬТАТ РУШІЯ
# ================================
@dataclass(frozen=True, slots=True)
class ProductMetadata:
    """
    Best-effort метадані товару.

    Поле або нормалізоване й непорожнє, або явно відсутнє:
    `""` для title/description, `None` для price/image_url.
    """

    domain: str
    original_url: str
    title: str = ""
    price: Optional[Decimal] = None
    image_url: Optional[str] = None
    description: str = ""
    source_strategy: Optional[SourceStrategy] = None

    @classmethod
    def degraded(cls, url: str, domain: Optional[str] = None) -> "ProductMetadata":
        """🪣 Запис лише з доменом (HTML не отримано)."""
        return cls(domain=domain if domain is not None else derive_domain(url), original_url=url)

    @property
    def is_degraded(self) -> bool:
        return self.source_strategy is None

    @property
    def has_content(self) -> bool:
        """True, якщо витягнуто хоча б одне поле окрім домену."""
        return bool(self.title or self.price is not None or self.image_url or self.description)

    def to_dict(self) -> Dict[str, Any]:
        """📦 JSON-сумісне представлення для шару застосунку."""
        return {
            "title": self.title,
            "price": float(self.price) if self.price is not None else None,
            "domain": self.domain,
            "image_url": self.image_url,
            "original_url": self.original_url,
            "description": self.description,
            "source": self.source_strategy.value if self.source_strategy else None,
        }


__all__ = [
    "SourceStrategy",
    "ExtractionRequest",
    "FetchResult",
    "FetchFailure",
    "FetchOutcome",
    "ProductMetadata",
]
