"""
🧪 test_logger.py — unit-тести для shared.utils.logger

Перевіряє:
- Консольний хендлер за замовчуванням, файл лише за явним шляхом
- Відсутність дублювання хендлерів
- JSON-формат з extra-полями
- Префікс get_logger
"""

import json
import logging
from logging.handlers import TimedRotatingFileHandler

import pytest

from product_scraper.shared.utils.logger import (
    LOG_NAME,
    JsonFormatter,
    LoggingConfig,
    get_logger,
    init_logging,
    init_logging_from_config,
)


@pytest.fixture(autouse=True)
def _restore_handlers():
    root = logging.getLogger(LOG_NAME)
    saved = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in saved[0]:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved[1])


def _file_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, TimedRotatingFileHandler)]


def test_console_only_by_default():
    logger = init_logging()
    assert logger.name == LOG_NAME
    assert not _file_handlers(logger)
    assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)


def test_handlers_not_duplicated():
    init_logging()
    count_before = len(logging.getLogger(LOG_NAME).handlers)
    init_logging()
    assert len(logging.getLogger(LOG_NAME).handlers) == count_before


def test_json_file_output(tmp_path):
    log_file = tmp_path / "logs" / "scraper.log"
    logger = init_logging(file=str(log_file), json=True, console=False, level="DEBUG")
    assert len(_file_handlers(logger)) == 1

    get_logger("web").info("fetched", extra={"http_status": 403})
    for handler in logger.handlers:
        handler.flush()

    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    record = lines[-1]
    assert record["message"] == "fetched"
    assert record["name"] == f"{LOG_NAME}.web"
    assert record["http_status"] == 403


def test_json_formatter_stringifies_unserializable_extra():
    record = logging.LogRecord(LOG_NAME, logging.INFO, __file__, 1, "msg", None, None)
    record.payload = object()
    data = json.loads(JsonFormatter().format(record))
    assert isinstance(data["payload"], str)


def test_init_from_config_applies_suppress():
    init_logging_from_config({"level": "INFO", "suppress": {"httpx": "ERROR"}})
    assert logging.getLogger("httpx").level == logging.ERROR


def test_get_logger_prefix():
    assert get_logger().name == LOG_NAME
    assert get_logger("engine").name == f"{LOG_NAME}.engine"


def test_foreign_handlers_survive_reinit():
    root = logging.getLogger(LOG_NAME)
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        init_logging()
        init_logging()
        assert foreign in root.handlers
    finally:
        root.removeHandler(foreign)


def test_config_from_yaml_node_with_nulls():
    cfg = LoggingConfig.from_mapping({"level": "debug", "console": None, "file": None, "json": None})
    assert cfg.level == "DEBUG"
    assert cfg.console is True
    assert cfg.file is None
    assert cfg.json is False
    assert dict(cfg.suppress) == {"httpx": "WARNING", "httpcore": "WARNING"}
