# 🧰 product_scraper/shared/utils/__init__.py
"""
🧰 Пакет спільних утиліт: логування та робота з URL.

🔹 Експортує обгортки для конфігурації логів.
🔹 Надає хелпери для валідації URL і нормалізації домену.
"""

from __future__ import annotations

# 🔠 Логування
from .logger import (
    LOG_NAME,
    get_logger,
    init_logging,
    init_logging_from_config,
)

# 🔗 URL
from .url_utils import (
    derive_domain,
    is_http_url,
    resolve_url,
)

__all__ = [
    "LOG_NAME",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
    "derive_domain",
    "is_http_url",
    "resolve_url",
]
