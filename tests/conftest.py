# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Добавляем src в sys.path, чтобы работал импорт "product_scraper.…" без установки пакета
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _no_render_key(monkeypatch):
    """Ключ рендера из окружения разработчика не должен влиять на тесты."""
    monkeypatch.delenv("BROWSERLESS_API_KEY", raising=False)
    monkeypatch.delenv("SCRAPER_RENDER_API_KEY", raising=False)
