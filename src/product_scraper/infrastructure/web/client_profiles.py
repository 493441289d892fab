# 🕵️ product_scraper/infrastructure/web/client_profiles.py
"""
🕵️ Профілі клієнта для прямого завантаження сторінок.

🔹 `ClientProfile` — іммутабельний набір заголовків (User-Agent + браузерні заголовки).
🔹 `DEFAULT_CLIENT_PROFILES` — desktop Chrome (macOS, Windows) та mobile Safari (iOS).
🔹 `ProfileRetryPolicy` — дані, що керують циклом перебору профілів.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field	# 🧱 Іммутабельні DTO
from types import MappingProxyType	# 🧊 Незмінні заголовки
from typing import Iterable, Mapping, Optional, Tuple	# 🧰 Типізація

# ================================
# 📦 КОНСТАНТИ МОДУЛЯ
# ================================
BROWSER_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Accept-Encoding": "gzip, deflate, br",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
        "Upgrade-Insecure-Requests": "1",
    }
)	# 🌐 Типовий набір навігаційного запиту браузера

UA_CHROME_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
UA_CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
UA_SAFARI_IOS = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/16.0 Mobile/15E148 Safari/604.1"
)


# ================================
# 🧱 ПРОФІЛЬ
# ================================
@dataclass(frozen=True, slots=True)
class ClientProfile:
    """Одна «особистість» клієнта."""

    name: str
    user_agent: str
    extra_headers: Mapping[str, str] = field(default_factory=lambda: BROWSER_HEADERS)

    def headers(self) -> dict:
        """Повний набір заголовків запиту."""
        return {**self.extra_headers, "User-Agent": self.user_agent}


DEFAULT_CLIENT_PROFILES: Tuple[ClientProfile, ...] = (
    ClientProfile(name="desktop-chrome-mac", user_agent=UA_CHROME_MAC),
    ClientProfile(name="desktop-chrome-windows", user_agent=UA_CHROME_WINDOWS),
    ClientProfile(name="mobile-safari-ios", user_agent=UA_SAFARI_IOS),
)


# ================================
# 🔁 ПОЛІТИКА ПЕРЕБОРУ
# ================================
@dataclass(frozen=True, slots=True)
class ProfileRetryPolicy:
    """
    Профілі пробуються строго послідовно; 200 завершує цикл.

    5xx і транспортні збої завжди ведуть до наступного профілю. Інші статуси
    (4xx) теж, якщо `stop_on_client_error` вимкнено.
    """

    profiles: Tuple[ClientProfile, ...] = DEFAULT_CLIENT_PROFILES
    stop_on_client_error: bool = False

    @classmethod
    def build(cls, profiles: Optional[Iterable[ClientProfile]] = None, *, stop_on_client_error: bool = False) -> "ProfileRetryPolicy":
        return cls(
            profiles=tuple(profiles) if profiles is not None else DEFAULT_CLIENT_PROFILES,
            stop_on_client_error=stop_on_client_error,
        )

    @staticmethod
    def is_success(status: int) -> bool:
        return status == 200

    def should_continue(self, status: int) -> bool:
        """Чи пробувати наступний профіль після відповіді зі статусом `status`."""
        if status >= 500:
            return True
        return not self.stop_on_client_error


__all__ = [
    "BROWSER_HEADERS",
    "ClientProfile",
    "DEFAULT_CLIENT_PROFILES",
    "ProfileRetryPolicy",
]
