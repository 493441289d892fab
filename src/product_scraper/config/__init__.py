# ⚙️ product_scraper/config/__init__.py
"""⚙️ Конфігураційний шар: `ConfigService` (.env + config.yaml)."""

from .config_service import ConfigService

__all__ = ["ConfigService"]
