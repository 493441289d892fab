# 🚨 product_scraper/shared/errors.py
"""
🚨 Ієрархія винятків рушія витягування метаданих.

🔹 `AppError` — базовий виняток із `details` та `to_log_extra()` для `logger.extra`.
🔹 `InvalidUrlError` — єдина помилка рівня запиту (домен неможливо визначити).
🔹 `classify_http_error` — мапить винятки httpx у `FailureReason` для логів і результатів.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт (винятки)

# 🔠 Системні імпорти
import logging															# 🧾 Логування
from enum import Enum													# 🏷️ Причини збоїв
from typing import Dict, Optional										# 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from product_scraper.shared.utils.logger import LOG_NAME				# 🏷️ Базове імʼя логера


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors")						# 🧾 Локальний логер


# ================================
# 🏷️ ПРИЧИНИ ЗБОЇВ ЗАВАНТАЖЕННЯ
# ================================
class FailureReason(str, Enum):
    """🚫 Причини, з яких сторінку не вдалося отримати."""

    HTTP_STATUS = "http_status"										# 🌐 Відповідь не 200
    TIMEOUT = "timeout"												# ⏳ Таймаут зʼєднання/читання
    CONNECTION = "connection"										# 🔌 Не вдалося зʼєднатися
    TOO_MANY_REDIRECTS = "too_many_redirects"						# 🔁 Перевищено ліміт редіректів
    NETWORK = "network"												# 🌐 Інші транспортні збої
    NO_PROFILES = "no_profiles"										# 🪣 Порожній список профілів


# ================================
# 🧠 БАЗОВІ ВИНЯТКИ
# ================================
class AppError(Exception):
    """🧠 Базовий виняток застосунку."""

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message										# 🗒️ Коротке повідомлення
        self.details = details										# 🔎 Технічні подробиці

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Формує словник для `logger.extra`."""
        extra: Dict[str, object] = {"error_code": "app_error"}
        if self.details:
            extra["details"] = self.details
        return extra


class InvalidUrlError(AppError, ValueError):
    """🔗 URL запиту неможливо розібрати (немає схеми або хоста)."""

    def __init__(self, url: object, *, details: Optional[str] = None) -> None:
        super().__init__(f"Invalid URL: {url!r}", details=details)
        self.url = url												# 🔗 Вхідне значення як є

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["error_code"] = "invalid_url"
        extra["url"] = str(self.url)
        return extra


# ================================
# 🧭 МАПІНГ ВИНЯТКІВ HTTPX
# ================================
def classify_http_error(exc: BaseException) -> FailureReason:
    """Повертає `FailureReason` для транспортного винятку httpx."""
    if isinstance(exc, httpx.TimeoutException):
        reason = FailureReason.TIMEOUT
    elif isinstance(exc, httpx.TooManyRedirects):
        reason = FailureReason.TOO_MANY_REDIRECTS
    elif isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError)):
        reason = FailureReason.CONNECTION
    elif isinstance(exc, httpx.HTTPStatusError):
        reason = FailureReason.HTTP_STATUS
    else:
        reason = FailureReason.NETWORK
    logger.debug("🧭 %s → %s", type(exc).__name__, reason.value)
    return reason


# ================================
# 📤 ПУБЛІЧНИЙ API
# ================================
__all__ = [
    "AppError",
    "InvalidUrlError",
    "FailureReason",
    "classify_http_error",
]
