# 🌍 product_scraper/infrastructure/web/__init__.py
"""
🌍 Інфраструктурний модуль для отримання HTML сторінок.

🔹 `HttpFetcher` — пряме завантаження з перебором профілів клієнта.
🔹 `RemoteRenderFallback` — віддалений рендер для сторінок, що блокують прямий доступ.
"""

from __future__ import annotations

from .client_profiles import DEFAULT_CLIENT_PROFILES, ClientProfile, ProfileRetryPolicy
from .http_fetcher import HttpFetcher
from .render_fallback import RemoteRenderFallback

__all__ = [
    "DEFAULT_CLIENT_PROFILES",
    "ClientProfile",
    "ProfileRetryPolicy",
    "HttpFetcher",
    "RemoteRenderFallback",
]
