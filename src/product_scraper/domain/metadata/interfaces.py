# product_scraper/domain/metadata/interfaces.py
"""
🧩 Контракти компонентів рушія (інфраструктура реалізує, сервіс споживає).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .entities import FetchOutcome, FetchResult

# ================================
# 🏛️ ІНТЕРФЕЙСИ
# ================================

class IPageFetcher(ABC):
    """Контракт прямого завантаження сторінки."""
    @abstractmethod
    async def fetch(self, url: str, deadline: Optional[float] = None) -> FetchOutcome:
        """Повертає HTML або опис збою; не підіймає винятків через мережу."""


class IRenderFallback(ABC):
    """Контракт віддаленого рендеру для сторінок, що блокують прямий доступ."""
    @abstractmethod
    async def render(self, url: str) -> Optional[FetchResult]:
        """Повертає відрендерений HTML або None."""
