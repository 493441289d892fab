# 🔗 product_scraper/shared/utils/url_utils.py
"""
🔗 Допоміжні функції для роботи з URL.

🔹 `derive_domain` — хост без провідного `www.` (єдине джерело правди про домен).
🔹 `is_http_url` — перевірка абсолютного http(s)-посилання з хостом.
🔹 `resolve_url` — резолв відносних/protocol-relative посилань відносно сторінки.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Optional							# 🧰 Типізація
from urllib.parse import urljoin, urlsplit				# 🌐 Розбір та склеювання URL

_HTTP_SCHEMES = ("http", "https")						# ✅ Дозволені схеми


def derive_domain(url: str) -> str:
    """
    🌐 Повертає хост URL без провідного `www.` (нижній регістр, без порту).

    Порожній рядок, якщо хост визначити неможливо.
    """
    try:
        host = urlsplit((url or "").strip()).hostname or ""	# 🧭 hostname вже в нижньому регістрі
    except ValueError:							# ⚠️ Зламаний IPv6-літерал тощо
        return ""
    return host[4:] if host.startswith("www.") else host


def is_http_url(url: Optional[str]) -> bool:
    """✅ True для абсолютного http(s)-URL з непорожнім хостом."""
    if not url:
        return False
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return parts.scheme.lower() in _HTTP_SCHEMES and bool(parts.netloc)


def resolve_url(candidate: Optional[str], base_url: Optional[str]) -> Optional[str]:
    """
    🧭 Робить URL абсолютним.

    `//cdn/x.jpg` → `https://cdn/x.jpg`; відносні шляхи резолвимо відносно `base_url`.
    Повертає None, якщо результат не є http(s)-посиланням.
    """
    raw = (candidate or "").strip()
    if not raw or raw.lower().startswith("data:"):		# 🚫 Порожнє або inline-дані
        return None
    if raw.startswith("//"):						# 🔗 Protocol-relative
        raw = f"https:{raw}"
    elif not is_http_url(raw):
        if not base_url:
            return None
        try:
            raw = urljoin(base_url, raw)				# 🧭 Резолвимо відносно сторінки
        except ValueError:
            return None
    return raw if is_http_url(raw) else None


__all__ = ["derive_domain", "is_http_url", "resolve_url"]
