"""
🧪 test_extraction_engine.py — сценарії ExtractionEngine end-to-end (без реальної мережі)

Перевіряє:
- JSON-LD сторінка → повний запис
- 403 на всіх профілях без ключа рендеру → запис лише з доменом
- Рендер після провалу прямого завантаження
- Дедлайн, неочікувані винятки, некоректний URL
- prefill / extract_sync / build_engine / to_dict
"""

import asyncio
import json
import logging
from decimal import Decimal
from typing import Optional

import httpx
import pytest

from product_scraper import InvalidUrlError
from product_scraper.domain.metadata.entities import (
    FetchFailure,
    FetchResult,
    ProductMetadata,
    SourceStrategy,
)
from product_scraper.domain.metadata.interfaces import IPageFetcher, IRenderFallback
from product_scraper.infrastructure.parsers._infra_options import EngineOptions
from product_scraper.infrastructure.web.http_fetcher import HttpFetcher
from product_scraper.services.extraction_engine import ExtractionEngine, build_engine
from product_scraper.shared.errors import FailureReason

URL = "https://www.example.com/p/1"

MOUSE_HTML = (
    "<html><head><title>Ignored | Shop</title>"
    '<script type="application/ld+json">'
    + json.dumps(
        {
            "@context": "https://schema.org",
            "@type": "Product",
            "name": "Wireless Mouse",
            "image": "https://cdn.example.com/a.jpg?w=200",
            "description": "Compact 2.4GHz mouse",
            "offers": {"@type": "Offer", "price": "29.99", "priceCurrency": "USD"},
        }
    )
    + "</script></head><body><h1>Other</h1></body></html>"
)


# ================================
# 🧪 ФЕЙКИ
# ================================
class _StaticFetcher(IPageFetcher):
    def __init__(self, html: Optional[str] = None, failure: Optional[FetchFailure] = None):
        self.html = html
        self.failure = failure
        self.calls = []

    async def fetch(self, url, deadline=None):
        self.calls.append((url, deadline))
        if self.html is None:
            return self.failure or FetchFailure(reason=FailureReason.HTTP_STATUS, http_status=403, attempts=3)
        return FetchResult(html=self.html, source_strategy=SourceStrategy.DIRECT_FETCH, http_status=200)


class _SlowFetcher(IPageFetcher):
    async def fetch(self, url, deadline=None):
        await asyncio.sleep(5)
        return FetchResult(html=MOUSE_HTML, source_strategy=SourceStrategy.DIRECT_FETCH)


class _BrokenFetcher(IPageFetcher):
    async def fetch(self, url, deadline=None):
        raise RuntimeError("boom")


class _StaticRender(IRenderFallback):
    def __init__(self, html: Optional[str]):
        self.html = html
        self.calls = []

    async def render(self, url):
        self.calls.append(url)
        if self.html is None:
            return None
        return FetchResult(html=self.html, source_strategy=SourceStrategy.REMOTE_RENDER, final_url=url)


class _FakeConfig:
    def __init__(self, data):
        self.data = data

    def get(self, key, default=None, cast=None):
        value = self.data
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value


# ================================
# 🔄 ASYNC-СЦЕНАРІЇ
# ================================
@pytest.mark.asyncio
async def test_json_ld_page_gives_full_record():
    engine = ExtractionEngine(fetcher=_StaticFetcher(MOUSE_HTML), render_fallback=_StaticRender(None))
    meta = await engine.extract(URL)

    assert meta.title == "Wireless Mouse"
    assert meta.price == Decimal("29.99")
    assert meta.image_url == "https://cdn.example.com/a.jpg"
    assert meta.domain == "example.com"
    assert meta.description == "Compact 2.4GHz mouse"
    assert meta.original_url == URL
    assert meta.source_strategy is SourceStrategy.DIRECT_FETCH


@pytest.mark.asyncio
async def test_forbidden_everywhere_without_render_key_is_degraded():
    calls = []

    def handler(request):
        calls.append(request.headers["User-Agent"])
        return httpx.Response(403, text="denied")

    options = EngineOptions()
    engine = ExtractionEngine(options, fetcher=HttpFetcher(options, transport=httpx.MockTransport(handler)))
    meta = await engine.extract(URL)

    assert len(calls) == 3
    assert meta.title == ""
    assert meta.description == ""
    assert meta.price is None
    assert meta.image_url is None
    assert meta.domain == "example.com"
    assert meta.is_degraded is True


@pytest.mark.asyncio
async def test_render_used_after_direct_failure():
    html = '<html><head><meta property="og:title" content="Rendered Shoe | Shop"></head></html>'
    fetcher = _StaticFetcher(None)
    render = _StaticRender(html)
    engine = ExtractionEngine(fetcher=fetcher, render_fallback=render)

    meta = await engine.extract(URL)

    assert render.calls == [URL]
    assert meta.title == "Rendered Shoe"
    assert meta.source_strategy is SourceStrategy.REMOTE_RENDER


@pytest.mark.asyncio
async def test_render_not_called_when_direct_succeeds():
    render = _StaticRender("<html></html>")
    engine = ExtractionEngine(fetcher=_StaticFetcher(MOUSE_HTML), render_fallback=render)
    await engine.extract(URL)
    assert render.calls == []


@pytest.mark.asyncio
async def test_render_success_without_title_is_still_rendered_record():
    render = _StaticRender('<html><body><div class="price">$5.00</div></body></html>')
    engine = ExtractionEngine(fetcher=_StaticFetcher(None), render_fallback=render)
    meta = await engine.extract(URL)

    assert meta.title == ""
    assert meta.price == Decimal("5.00")
    assert meta.source_strategy is SourceStrategy.REMOTE_RENDER


@pytest.mark.asyncio
async def test_deadline_returns_degraded_record():
    engine = ExtractionEngine(fetcher=_SlowFetcher(), render_fallback=_StaticRender(None))
    meta = await engine.extract(URL, deadline=0.05)

    assert meta == ProductMetadata.degraded(URL)
    assert meta.domain == "example.com"


@pytest.mark.asyncio
async def test_unexpected_error_is_contained():
    engine = ExtractionEngine(fetcher=_BrokenFetcher(), render_fallback=_StaticRender(None))
    meta = await engine.extract(URL)
    assert meta.is_degraded
    assert meta.domain == "example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize("bad", ["not a url", "", "example.com/p/1", "https://"])
async def test_invalid_url_raises(bad):
    fetcher = _StaticFetcher(MOUSE_HTML)
    engine = ExtractionEngine(fetcher=fetcher, render_fallback=_StaticRender(None))
    with pytest.raises(InvalidUrlError):
        await engine.extract(bad)
    assert fetcher.calls == []


@pytest.mark.asyncio
async def test_prefill_passes_interactive_deadline():
    fetcher = _StaticFetcher(MOUSE_HTML)
    engine = ExtractionEngine(
        EngineOptions(interactive_deadline_sec=2.5),
        fetcher=fetcher,
        render_fallback=_StaticRender(None),
    )
    meta = await engine.prefill(URL)

    assert meta.title == "Wireless Mouse"
    assert fetcher.calls == [(URL, 2.5)]


@pytest.mark.asyncio
async def test_default_deadline_from_options():
    fetcher = _StaticFetcher(MOUSE_HTML)
    engine = ExtractionEngine(
        EngineOptions(default_deadline_sec=30),
        fetcher=fetcher,
        render_fallback=_StaticRender(None),
    )
    await engine.extract(URL)
    assert fetcher.calls == [(URL, 30)]


@pytest.mark.asyncio
async def test_concurrent_calls_are_independent():
    fetcher = _StaticFetcher(MOUSE_HTML)
    engine = ExtractionEngine(fetcher=fetcher, render_fallback=_StaticRender(None))
    urls = [f"https://shop{i}.example.com/p" for i in range(5)]

    results = await asyncio.gather(*(engine.extract(u) for u in urls))

    assert [r.domain for r in results] == [f"shop{i}.example.com" for i in range(5)]
    assert all(r.title == "Wireless Mouse" for r in results)


# ================================
# 🧵 СИНХРОННІ СЦЕНАРІЇ
# ================================
def test_extract_sync_wrapper():
    engine = ExtractionEngine(fetcher=_StaticFetcher(MOUSE_HTML), render_fallback=_StaticRender(None))
    meta = engine.extract_sync(URL)
    assert meta.title == "Wireless Mouse"


def test_extract_from_html_without_network():
    engine = ExtractionEngine(fetcher=_BrokenFetcher(), render_fallback=_StaticRender(None))
    meta = engine.extract_from_html(MOUSE_HTML, URL)
    assert meta.price == Decimal("29.99")
    assert meta.source_strategy is SourceStrategy.DIRECT_FETCH


def test_to_dict_shape():
    engine = ExtractionEngine(fetcher=_BrokenFetcher(), render_fallback=_StaticRender(None))
    data = engine.extract_from_html(MOUSE_HTML, URL).to_dict()

    assert data == {
        "title": "Wireless Mouse",
        "price": 29.99,
        "domain": "example.com",
        "image_url": "https://cdn.example.com/a.jpg",
        "original_url": URL,
        "description": "Compact 2.4GHz mouse",
        "source": "direct_fetch",
    }
    assert ProductMetadata.degraded(URL).to_dict()["source"] is None


def test_build_engine_from_config():
    config = _FakeConfig(
        {
            "engine": {"max_redirects": 4, "price_max": 500, "default_deadline_sec": None},
            "render": {"endpoint": "https://render.example.net/unblock", "api_key": "abc", "timeout_sec": 30},
            "parser": {"selectors": {"title_css": [".custom-name"]}},
        }
    )
    engine = build_engine(config, fetch_timeout_sec=9)

    assert engine.options.max_redirects == 4
    assert engine.options.price_max == Decimal("500")
    assert engine.options.fetch_timeout_sec == 9
    assert engine.options.render_endpoint == "https://render.example.net/unblock"
    assert engine.options.render_timeout_sec == 30
    assert engine.options.render_enabled is True

    meta = engine.extract_from_html('<h1>Generic</h1><span class="custom-name">Custom</span>', URL)
    assert meta.title == "Custom"


def test_build_engine_applies_logging_section():
    config = _FakeConfig({"logging": {"level": "INFO", "console": False, "suppress": {"httpx": "WARNING"}}})
    logging.getLogger("httpx").setLevel(logging.NOTSET)

    build_engine(config)
    assert logging.getLogger("httpx").level == logging.WARNING

    logging.getLogger("httpx").setLevel(logging.NOTSET)
    build_engine(config, configure_logging=False)
    assert logging.getLogger("httpx").level == logging.NOTSET
