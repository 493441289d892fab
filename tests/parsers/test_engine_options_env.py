import os
from contextlib import contextmanager
from decimal import Decimal

import pytest

from product_scraper.infrastructure.parsers._infra_options import EngineOptions


@contextmanager
def _env(**pairs):
    old = {k: os.environ.get(k) for k in pairs}
    try:
        for k, v in pairs.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = str(v)
        yield
    finally:
        for k, v in old.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v


def test_defaults_when_env_empty():
    with _env(SCRAPER_HTML_PARSER=None, SCRAPER_FETCH_TIMEOUT_SEC=None, SCRAPER_MAX_REDIRECTS=None):
        opts = EngineOptions.from_env()
        assert opts.html_parser == "lxml"
        assert opts.fetch_timeout_sec == 15
        assert opts.max_redirects == 10
        assert opts.render_timeout_sec == 60
        assert opts.price_min == Decimal("0")
        assert opts.price_max == Decimal("100000")
        assert opts.render_enabled is False


def test_override_with_default_prefix():
    with _env(SCRAPER_FETCH_TIMEOUT_SEC="7", SCRAPER_PRICE_MAX="250000", SCRAPER_STOP_ON_CLIENT_ERROR="yes"):
        opts = EngineOptions.from_env()
        assert opts.fetch_timeout_sec == 7
        assert opts.price_max == Decimal("250000")
        assert opts.stop_on_client_error is True


def test_api_key_from_browserless_env():
    with _env(BROWSERLESS_API_KEY="secret-token"):
        opts = EngineOptions.from_env()
        assert opts.render_api_key == "secret-token"
        assert opts.render_enabled is True
        assert opts.summary()["render_api_key"] == "***"


def test_custom_prefix():
    with _env(WISH_FETCH_TIMEOUT_SEC="3", SCRAPER_FETCH_TIMEOUT_SEC=None):
        opts = EngineOptions.from_env(prefix="WISH_")
        assert opts.fetch_timeout_sec == 3


def test_invalid_values_fall_back_to_defaults():
    with _env(SCRAPER_MAX_REDIRECTS="-5", SCRAPER_FETCH_TIMEOUT_SEC="abc", SCRAPER_HTML_PARSER="nope"):
        # from_env не кидає — некоректні поля отримують дефолти
        opts = EngineOptions.from_env()
        assert opts.max_redirects == 10
        assert opts.fetch_timeout_sec == 15
        assert opts.html_parser == "lxml"


def test_invalid_price_bounds_rejected_directly():
    with pytest.raises(ValueError):
        EngineOptions(price_min=Decimal("10"), price_max=Decimal("5"))


def test_from_dict_and_merge():
    opts = EngineOptions.from_dict({"max_redirects": 3, "price_max": 500, "unknown": 1, "default_deadline_sec": None})
    assert opts.max_redirects == 3
    assert opts.price_max == Decimal("500")
    merged = opts.merge(max_redirects=5, html_parser=None)
    assert merged.max_redirects == 5
    assert merged.html_parser == "lxml"
    assert opts.max_redirects == 3


def test_blank_api_key_means_disabled():
    assert EngineOptions(render_api_key="   ").render_enabled is False
