# 🧾 product_scraper/infrastructure/parsers/_infra_options.py
"""
🧾 Налаштування інфраструктурного шару рушія витягування.

🔹 Визначає іммутабельні опції (HTML-парсер, таймаути, редіректи, рендер, межі ціни, ліміти довжин).
🔹 Підтримує зчитування з ENV, словника (YAML-розділ `engine`) та мердж конфігів.
🔹 Експортує дефолтний обʼєкт `DEFAULT_ENGINE_OPTIONS`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging	# 🧾 Логування ініціалізації та валідації
import os	# 🌱 Зчитування ENV
from dataclasses import dataclass, fields	# 🧱 Dataclass для опцій
from decimal import Decimal, InvalidOperation	# 💰 Межі ціни
from typing import Any, Dict, Mapping, Optional	# 🧰 Типи для статичного аналізу

# 🧩 Внутрішні модулі проєкту
from product_scraper.shared.utils.logger import LOG_NAME	# 🏷️ Базове імʼя логера

# ================================
# 🧾 ЛОГЕР ТА КОНСТАНТИ
# ================================
logger = logging.getLogger(f"{LOG_NAME}.parsers.infra_options")	# 🧾 Модульний логер

_BOOL_TRUE = {"1", "true", "yes", "on", "y", "t"}	# ✅ Булеві true-представлення
_BOOL_FALSE = {"0", "false", "no", "off", "n", "f"}	# ❌ Булеві false-представлення

ALLOWED_HTML_PARSERS = frozenset({"lxml", "html.parser", "html5lib"})	# 🥣 Підтримувані бекенди bs4
DEFAULT_RENDER_ENDPOINT = "https://production-sfo.browserless.io/unblock"	# 🛰️ Сервіс рендеру


# ================================
# 🛠️ ХЕЛПЕРИ КОНВЕРСІЙ
# ================================

def _parse_bool(val: Optional[str], default: bool) -> bool:
    """🔀 Перетворює ENV-рядок у bool з fallback."""
    if val is None:	# 🪣 Немає значення → дефолт
        return default
    cleaned = val.strip().lower()	# 🧼 Нормалізуємо кейс/пробіли
    if cleaned in _BOOL_TRUE:
        return True
    if cleaned in _BOOL_FALSE:
        return False
    logger.warning("⚠️ Некоректне булеве значення '%s' → fallback=%s.", val, default)
    return default


def _to_int(val: Optional[str], default_val: int) -> int:
    """🔢 Конвертує рядок у int із захистом від помилок."""
    try:
        return int(val) if val is not None else default_val
    except (TypeError, ValueError):
        logger.warning("⚠️ Неможливо перетворити '%s' у int → fallback=%s.", val, default_val)
        return default_val


def _to_float(val: Optional[str], default_val: Optional[float]) -> Optional[float]:
    """🔢 Конвертує рядок у float із fallback."""
    try:
        return float(val) if val is not None else default_val
    except (TypeError, ValueError):
        logger.warning("⚠️ Неможливо перетворити '%s' у float → fallback=%s.", val, default_val)
        return default_val


def _to_decimal(val: Any, default_val: Decimal) -> Decimal:
    """💰 Конвертує значення у Decimal (через str, щоб уникнути артефактів float)."""
    if val is None:
        return default_val
    try:
        return Decimal(str(val).strip())
    except (InvalidOperation, ValueError):
        logger.warning("⚠️ Неможливо перетворити '%s' у Decimal → fallback=%s.", val, default_val)
        return default_val


# ================================
# 🧱 МОДЕЛЬ ОПЦІЙ
# ================================
@dataclass(frozen=True, slots=True)
class EngineOptions:
    """🧱 Іммутабельні параметри рушія (спільні для всіх викликів)."""

    # 🥣 Парсинг
    html_parser: str = "lxml"	# 🥣 Бекенд BeautifulSoup

    # 🌐 Пряме завантаження
    fetch_timeout_sec: float = 15.0	# ⏱️ Таймаут однієї спроби
    max_redirects: int = 10	# 🔁 Ліміт редіректів
    stop_on_client_error: bool = False	# 🛑 Зупиняти перебір профілів на 4xx

    # 🛰️ Віддалений рендер
    render_endpoint: str = DEFAULT_RENDER_ENDPOINT
    render_proxy: Optional[str] = "residential"	# 🧦 Тип проксі сервісу
    render_timeout_sec: float = 60.0	# ⏱️ Таймаут рендеру
    render_api_key: Optional[str] = None	# 🔐 None → рендер вимкнено

    # 🧽 Нормалізація
    price_min: Decimal = Decimal("0")	# 💰 Нижня межа (виключно)
    price_max: Decimal = Decimal("100000")	# 💰 Верхня межа (виключно)
    title_max_len: int = 255	# 🏷️ Ліміт назви
    description_max_len: int = 500	# 📝 Ліміт опису

    # ⏳ Дедлайни
    interactive_deadline_sec: float = 5.0	# 🖱️ Для префілу форми
    default_deadline_sec: Optional[float] = None	# ⏳ Глобальний дедлайн (None → без обмеження)

    def __post_init__(self) -> None:
        """🛡️ Валідує інваріанти одразу після створення."""
        if self.html_parser not in ALLOWED_HTML_PARSERS:
            raise ValueError(f"html_parser must be one of {set(ALLOWED_HTML_PARSERS)}, got: {self.html_parser!r}")
        if self.fetch_timeout_sec <= 0:
            raise ValueError("fetch_timeout_sec must be > 0")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be >= 0")
        if self.render_timeout_sec <= 0:
            raise ValueError("render_timeout_sec must be > 0")
        if not self.render_endpoint:
            raise ValueError("render_endpoint must not be empty")
        object.__setattr__(self, "price_min", _to_decimal(self.price_min, Decimal("0")))
        object.__setattr__(self, "price_max", _to_decimal(self.price_max, Decimal("100000")))
        if self.price_min >= self.price_max:
            raise ValueError("price_min must be < price_max")
        if self.title_max_len <= 0 or self.description_max_len <= 0:
            raise ValueError("title_max_len/description_max_len must be > 0")
        if self.interactive_deadline_sec <= 0:
            raise ValueError("interactive_deadline_sec must be > 0")
        if self.default_deadline_sec is not None and self.default_deadline_sec <= 0:
            raise ValueError("default_deadline_sec must be > 0")
        object.__setattr__(self, "render_api_key", (self.render_api_key or "").strip() or None)	# 🪣 Порожній ключ = немає ключа

    # ================================
    # 🧱 КОНСТРУКТОРИ
    # ================================
    @classmethod
    def default(cls) -> "EngineOptions":
        """🧾 Повертає дефолтний набір опцій."""
        return cls()

    @classmethod
    def from_env(cls, prefix: str = "SCRAPER_") -> "EngineOptions":
        """
        🌱 Будує опції з ENV.

        Некоректні значення не підіймають винятків: кожне поле, що не пройшло
        конверсію або валідацію, отримує дефолт.
        """
        defaults = cls.default()

        def _get(name: str) -> Optional[str]:
            return os.getenv(f"{prefix}{name}")

        kwargs: Dict[str, Any] = {
            "html_parser": _get("HTML_PARSER") or defaults.html_parser,
            "fetch_timeout_sec": _to_float(_get("FETCH_TIMEOUT_SEC"), defaults.fetch_timeout_sec),
            "max_redirects": _to_int(_get("MAX_REDIRECTS"), defaults.max_redirects),
            "stop_on_client_error": _parse_bool(_get("STOP_ON_CLIENT_ERROR"), defaults.stop_on_client_error),
            "render_endpoint": _get("RENDER_ENDPOINT") or defaults.render_endpoint,
            "render_proxy": _get("RENDER_PROXY") or defaults.render_proxy,
            "render_timeout_sec": _to_float(_get("RENDER_TIMEOUT_SEC"), defaults.render_timeout_sec),
            "render_api_key": os.getenv("BROWSERLESS_API_KEY") or _get("RENDER_API_KEY"),
            "price_min": _to_decimal(_get("PRICE_MIN"), defaults.price_min),
            "price_max": _to_decimal(_get("PRICE_MAX"), defaults.price_max),
            "title_max_len": _to_int(_get("TITLE_MAX_LEN"), defaults.title_max_len),
            "description_max_len": _to_int(_get("DESCRIPTION_MAX_LEN"), defaults.description_max_len),
            "interactive_deadline_sec": _to_float(_get("INTERACTIVE_DEADLINE_SEC"), defaults.interactive_deadline_sec),
            "default_deadline_sec": _to_float(_get("DEADLINE_SEC"), defaults.default_deadline_sec),
        }
        logger.info("🌱 EngineOptions зібрано з ENV (prefix=%s).", prefix)
        return cls._build_lenient(kwargs)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "EngineOptions":
        """🧾 Складання опцій із словника (зайві ключі та None ігноруються)."""
        if not data:
            return cls.default()
        keys = {f.name for f in fields(cls)}	# 🗂️ Дозволені ключі
        kwargs: Dict[str, Any] = {key: data[key] for key in keys if data.get(key) is not None}
        logger.debug("🧾 EngineOptions.from_dict з ключами: %s", sorted(kwargs))
        return cls(**kwargs)

    @classmethod
    def _build_lenient(cls, kwargs: Dict[str, Any]) -> "EngineOptions":
        """🛡️ Створює опції; поля, що ламають валідацію, відкочуються до дефолтів."""
        try:
            return cls(**kwargs)
        except ValueError as exc:
            logger.warning("⚠️ Некоректні опції з ENV (%s) → перевіряємо поля поодинці.", exc)
        defaults = cls.default().to_kwargs()
        accepted: Dict[str, Any] = {}
        for key, value in kwargs.items():
            try:
                cls(**{**defaults, **accepted, key: value})
                accepted[key] = value
            except ValueError:
                logger.warning("⚠️ %s=%r відхилено → fallback=%r.", key, value, defaults[key])
        return cls(**{**defaults, **accepted})

    # ================================
    # 🧰 УТИЛІТИ ЕКЗЕМПЛЯРА
    # ================================
    def merge(self, **overrides: Any) -> "EngineOptions":
        """🔀 Повертає новий екземпляр із підмінними полями (immutability)."""
        base = self.to_kwargs()
        base.update({key: value for key, value in overrides.items() if value is not None})
        logger.debug("🔀 merge overrides=%s", sorted(overrides))	# 🪵 Лише ключі: значення можуть містити секрети
        return EngineOptions(**base)

    def to_kwargs(self) -> Dict[str, Any]:
        """📦 Представляє опції як dict для подальшого передавання."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def summary(self) -> Dict[str, Any]:
        """🪵 Те саме, що `to_kwargs`, але без секретів (для логів)."""
        data = self.to_kwargs()
        data["render_api_key"] = "***" if self.render_api_key else None
        return data

    @property
    def render_enabled(self) -> bool:
        return self.render_api_key is not None


# ================================
# 📦 ГЛОБАЛЬНИЙ ДЕФОЛТ
# ================================
DEFAULT_ENGINE_OPTIONS = EngineOptions.default()	# 📦 Базовий екземпляр

__all__ = ["EngineOptions", "DEFAULT_ENGINE_OPTIONS", "ALLOWED_HTML_PARSERS"]	# 📦 Публічний експорт
