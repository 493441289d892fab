"""
🧪 test_entities.py — доменні сутності та URL-хелпери

Перевіряє:
- Валідацію ExtractionRequest (схема, хост, дедлайн)
- Обчислення домену без `www.`
- ProductMetadata.degraded / has_content
- resolve_url / is_http_url
"""

from decimal import Decimal

import pytest

from product_scraper.domain.metadata.entities import ExtractionRequest, ProductMetadata, SourceStrategy
from product_scraper.shared.errors import InvalidUrlError
from product_scraper.shared.utils.url_utils import derive_domain, is_http_url, resolve_url


def test_request_strips_and_derives_domain():
    request = ExtractionRequest("  https://WWW.Shop.Example.com:8443/p?id=1  ")
    assert request.url == "https://WWW.Shop.Example.com:8443/p?id=1"
    assert request.domain == "shop.example.com"


@pytest.mark.parametrize("bad", ["not a url", "", "/relative/path", "mailto:", "http://[::1"])
def test_request_rejects_unparseable(bad):
    with pytest.raises(InvalidUrlError) as excinfo:
        ExtractionRequest(bad)
    assert excinfo.value.to_log_extra()["error_code"] == "invalid_url"


def test_request_rejects_non_string():
    with pytest.raises(InvalidUrlError):
        ExtractionRequest(None)


def test_invalid_url_error_is_value_error():
    with pytest.raises(ValueError):
        ExtractionRequest("nope")


def test_non_http_scheme_with_host_is_accepted():
    # домен визначається → запит валідний, завантаження згодом просто не вдасться
    assert ExtractionRequest("ftp://files.example.com/x").domain == "files.example.com"


@pytest.mark.parametrize("deadline", [0, -1])
def test_request_rejects_non_positive_deadline(deadline):
    with pytest.raises(ValueError):
        ExtractionRequest("https://example.com", deadline=deadline)


def test_only_leading_www_is_stripped():
    assert derive_domain("https://www.example.co.uk/p") == "example.co.uk"
    assert derive_domain("https://shop.www.example.com/") == "shop.www.example.com"
    assert derive_domain("https://www2.example.com/") == "www2.example.com"
    assert derive_domain("garbage") == ""


def test_degraded_record():
    meta = ProductMetadata.degraded("https://www.example.com/p/1")
    assert meta.domain == "example.com"
    assert meta.title == "" and meta.description == ""
    assert meta.price is None and meta.image_url is None
    assert meta.is_degraded and not meta.has_content


def test_has_content_with_single_field():
    meta = ProductMetadata(
        domain="example.com",
        original_url="https://example.com/p",
        price=Decimal("1.50"),
        source_strategy=SourceStrategy.DIRECT_FETCH,
    )
    assert meta.has_content
    assert not meta.is_degraded


def test_resolve_url_variants():
    base = "https://www.example.com/products/widget"
    assert resolve_url("//cdn.example.com/a.jpg", base) == "https://cdn.example.com/a.jpg"
    assert resolve_url("/img/a.jpg", base) == "https://www.example.com/img/a.jpg"
    assert resolve_url("b.jpg", base) == "https://www.example.com/products/b.jpg"
    assert resolve_url("https://cdn.example.com/x.jpg", None) == "https://cdn.example.com/x.jpg"
    assert resolve_url("data:image/png;base64,AAA", base) is None
    assert resolve_url("/img/a.jpg", None) is None
    assert resolve_url("javascript:void(0)", base) is None


def test_is_http_url():
    assert is_http_url("http://example.com")
    assert not is_http_url("ftp://example.com")
    assert not is_http_url("/path")
    assert not is_http_url(None)
