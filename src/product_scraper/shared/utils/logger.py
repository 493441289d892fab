# 📜 product_scraper/shared/utils/logger.py
"""
📜 Логування рушія витягування метаданих.

🔹 `init_logging_from_config` стартує логер із розділу `logging` ConfigService (викликає `build_engine`).
🔹 Консоль за замовчуванням; файл із добовою ротацією лише за явним шляхом (`logging.file` / `SCRAPER_LOG_FILE`).
🔹 JSON-формат файлу переносить `extra`-поля (`fetch_reason`, `http_status`, `profile`, `error_code`).
🔹 httpx/httpcore приглушено до WARNING: у їхніх INFO-рядках URL рендеру разом із `token`.
🔹 Повторна ініціалізація замінює лише власні хендлери, чужі (застосунку-хоста) не чіпає.
"""
from __future__ import annotations

# 🔠 Системні імпорти
import json									# 📦 JSON-рядки логів
import logging									# 🪵 Стандартне логування
import sys									# 🖥️ stdout
import threading								# 🔒 Захист ініціалізації
from dataclasses import dataclass, field, replace				# 🧱 Конфіг логування
from logging.handlers import TimedRotatingFileHandler			# 📁 Ротація файлу
from pathlib import Path								# 📂 Шлях до файлу
from typing import Any, Dict, List, Mapping, Optional, Union

# ================================
# 🧾 КОНСТАНТИ МОДУЛЯ
# ================================
LOG_NAME: str = "product_scraper"						# 🏷️ Префікс усіх логерів пакета
CONSOLE_FORMAT: str = "[%(levelname).1s] %(name)s: %(message)s"
FILE_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
DEFAULT_SUPPRESS: Dict[str, str] = {"httpx": "WARNING", "httpcore": "WARNING"}

_OWNED = "_product_scraper_handler"						# 🏷️ Мітка хендлерів, створених цим модулем
_BASE_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}
_lock = threading.Lock()


# ================================
# 🧾 КОНФІГУРАЦІЯ
# ================================
@dataclass(frozen=True)
class LoggingConfig:
    """Налаштування логування (дзеркало розділу `logging` у config.yaml)."""

    level: str = "INFO"
    console: bool = True
    json: bool = False							# 📦 JSON лише для файлу
    file: Optional[str] = None						# 📁 None → без файлу
    backup_count: int = 7							# ♻️ Скільки добових файлів тримати
    suppress: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_SUPPRESS))

    @classmethod
    def from_mapping(cls, node: Optional[Mapping[str, Any]]) -> "LoggingConfig":
        """Будує конфіг зі словника; відсутні або `null` ключі → дефолти."""
        node = node or {}
        defaults = cls()
        suppress = node.get("suppress")
        return cls(
            level=str(node.get("level") or defaults.level).upper(),
            console=defaults.console if node.get("console") is None else bool(node["console"]),
            json=bool(node.get("json") or False),
            file=str(node["file"]) if node.get("file") else None,
            backup_count=int(node.get("backup_count") or defaults.backup_count),
            suppress=dict(DEFAULT_SUPPRESS) if suppress is None else dict(suppress),
        )


# ================================
# 🧰 ФОРМАТТЕР
# ================================
class JsonFormatter(logging.Formatter):
    """Один JSON-рядок на запис; несеріалізовані `extra` стають рядками."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, datefmt="%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _BASE_RECORD_ATTRS or key.startswith("_") or key in payload:
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = str(value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _to_level(value: Union[str, int, None], default: int) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value or "").upper())
    return level if isinstance(level, int) else default


def _build_handlers(cfg: LoggingConfig) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if cfg.console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handlers.append(console)
    if cfg.file:
        path = Path(cfg.file)
        path.parent.mkdir(parents=True, exist_ok=True)		# 🧱 Каталог логів може ще не існувати
        file_handler = TimedRotatingFileHandler(
            filename=str(path),
            when="midnight",
            backupCount=cfg.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(JsonFormatter() if cfg.json else logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)
    return handlers


# ================================
# 🚀 ПУБЛІЧНИЙ API
# ================================
def init_logging(config: Optional[LoggingConfig] = None, **overrides: Any) -> logging.Logger:
    """
    Налаштовує логер `product_scraper`.

    Args:
        config: Готовий `LoggingConfig` (None → дефолти).
        overrides: Окремі поля `LoggingConfig` поверх `config`.
    """
    cfg = config or LoggingConfig()
    if overrides:
        cfg = replace(cfg, **overrides)

    root_logger = logging.getLogger(LOG_NAME)
    with _lock:
        root_logger.setLevel(_to_level(cfg.level, logging.INFO))
        for handler in list(root_logger.handlers):
            if getattr(handler, _OWNED, False):				# 🧹 Лише свої хендлери
                root_logger.removeHandler(handler)
                handler.close()
        for handler in _build_handlers(cfg):
            setattr(handler, _OWNED, True)
            root_logger.addHandler(handler)
        for name, level in cfg.suppress.items():
            logging.getLogger(name).setLevel(_to_level(level, logging.WARNING))

    root_logger.info(
        "✅ Logging initialized | level=%s console=%s json=%s file=%s",
        cfg.level, "ON" if cfg.console else "OFF", "ON" if cfg.json else "OFF", cfg.file or "-",
    )
    return root_logger


def init_logging_from_config(node: Optional[Mapping[str, Any]]) -> logging.Logger:
    """Ініціалізує логування з розділу `logging` ConfigService."""
    return init_logging(LoggingConfig.from_mapping(node))


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    """Дочірній логер `product_scraper.<suffix>`."""
    return logging.getLogger(f"{LOG_NAME}.{suffix}" if suffix else LOG_NAME)


__all__ = [
    "LOG_NAME",
    "LoggingConfig",
    "JsonFormatter",
    "init_logging",
    "init_logging_from_config",
    "get_logger",
]
