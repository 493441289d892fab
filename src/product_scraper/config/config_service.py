# ⚙️ product_scraper/config/config_service.py
"""
⚙️ config_service.py — Сервіс для доступу до статичної конфігурації.

🔹 Клас `ConfigService`:
- Завантажує конфігурацію з .env та config.yaml.
- Надає єдиний метод .get() для доступу до будь-якого параметра (з опційним `cast`).
- Працює як Singleton; `reset()` скидає кеш (для тестів).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import logging                              # 🧾 Логування
import os                                   # 📁 Доступ до змінних середовища
from pathlib import Path                    # 📁 Побудова шляху до файлів
from typing import Any, Callable, Dict, Optional, Union   # 🧩 Типізація

# 🧩 Внутрішні модулі проєкту
from product_scraper.shared.utils.logger import LOG_NAME    # 🏷️ Базове імʼя логера

logger = logging.getLogger(f"{LOG_NAME}.config")            # 🧾 Локальний логер

# 🌱 ENV → крапкові ключі конфігурації
ENV_MAPPING: Dict[str, str] = {
    "BROWSERLESS_API_KEY": "render.api_key",
    "SCRAPER_RENDER_ENDPOINT": "render.endpoint",
    "SCRAPER_LOG_LEVEL": "logging.level",
    "SCRAPER_LOG_FILE": "logging.file",
}

DEFAULT_YAML_PATH = Path(__file__).parent / "config.yaml"


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх статичних конфігураційних параметрів проєкту.
    Працює як Singleton — конфігурація зчитується лише один раз.
    Пріоритет: .env перекриває config.yaml.
    """

    _instance: Optional["ConfigService"] = None     # 🧩 Singleton-екземпляр
    _yaml_path: Path = DEFAULT_YAML_PATH             # 📘 Шлях до YAML (підміняється в тестах)

    def __new__(cls):
        # ✅ Патерн Singleton: створюємо лише один екземпляр
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance._load_all_configs()
            cls._instance = instance
            logger.debug("🔄 Singleton ConfigService створено і конфігурація завантажена")
        return cls._instance

    @classmethod
    def reset(cls, yaml_path: Optional[Union[str, Path]] = None) -> None:
        """♻️ Скидає singleton; наступний виклик перечитає джерела."""
        cls._instance = None
        cls._yaml_path = Path(yaml_path) if yaml_path else DEFAULT_YAML_PATH

    def _load_all_configs(self) -> None:
        """📥 Завантажує всі джерела конфігурації в один словник."""

        # --- 1. YAML-файл ---
        try:
            logger.debug("📘 Завантаження %s", self._yaml_path)
            with open(self._yaml_path, "r", encoding="utf-8") as f:
                self._deep_update(self._config, yaml.safe_load(f) or {})
        except (FileNotFoundError, yaml.YAMLError) as e:
            logger.warning("⚠️ Не вдалося завантажити config.yaml: %s", e)

        # --- 2. .env змінні ---
        load_dotenv()  # 🔐 Ініціалізує змінні середовища з файлу .env
        env_vars = {key: os.getenv(env) for env, key in ENV_MAPPING.items()}
        env_vars = {key: value for key, value in env_vars.items() if value}     # 🪣 Порожні не перекривають YAML
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.info("✅ Конфігурацію успішно завантажено.")

    def get(self, key: str, default: Any = None, cast: Optional[Callable[[Any], Any]] = None) -> Any:
        """
        🔑 Отримує значення конфігурації за ключем (наприклад: 'engine.fetch_timeout_sec').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення за замовчуванням, якщо ключ не знайдено.
            cast (Callable): Опційне приведення типу; при помилці повертається default.

        Returns:
            Any: Значення параметра або default.
        """
        value: Any = self._config
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]                 # 🔎 Переходимо глибше в структуру
            else:
                return default
        if cast is not None and value is not None:
            try:
                return cast(value)
            except (TypeError, ValueError):
                logger.warning("⚠️ Ключ '%s': не вдалося привести %r → default", key, value)
                return default
        return value

    def as_dict(self) -> Dict[str, Any]:
        """📦 Поверхнева копія обʼєднаного словника."""
        return dict(self._config)

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================

    @staticmethod
    def _unflatten_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'render.api_key' → {'render': {'api_key': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split('.')
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value
        return result

    def _deep_update(self, source: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """🔁 Рекурсивно обʼєднує два словника (вкладені dict зливаються глибоко)."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                self._deep_update(source[key], value)
            else:
                source[key] = value


__all__ = ["ConfigService", "ENV_MAPPING"]
