# 🛰️ product_scraper/infrastructure/web/render_fallback.py
"""
🛰️ RemoteRenderFallback — віддалений рендер сторінки (browserless `/unblock`).

🔹 Викликається лише після повного провалу прямого завантаження.
🔹 Без API-ключа вимкнений: одразу повертає None (повідомлення пишеться один раз, при створенні).
🔹 Весь запит обмежено `render_timeout_sec` (60 с).
🔹 Будь-який збій (транспорт, не-200, не-JSON, порожній `content`) → None, без винятків.
🔹 `render_metadata` — автономний режим: рендер + той самий пайплайн, запис лише за наявності назви.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import asyncio															# ⏳ Межа на весь запит рендеру
import logging															# 🧾 Логування
from typing import Any, Dict, Optional									# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from product_scraper.domain.metadata.entities import FetchResult, ProductMetadata, SourceStrategy
from product_scraper.domain.metadata.interfaces import IRenderFallback
from product_scraper.infrastructure.parsers._infra_options import DEFAULT_ENGINE_OPTIONS, EngineOptions
from product_scraper.infrastructure.parsers.document import Document
from product_scraper.infrastructure.parsers.pipeline import ExtractionPipeline
from product_scraper.infrastructure.parsers.normalizer import FieldNormalizer
from product_scraper.shared.errors import FailureReason, classify_http_error
from product_scraper.shared.utils.logger import LOG_NAME
from product_scraper.shared.utils.url_utils import derive_domain

logger = logging.getLogger(f"{LOG_NAME}.render")


class RemoteRenderFallback(IRenderFallback):
    """🛰️ Клієнт сервісу віддаленого рендеру."""

    def __init__(
        self,
        options: EngineOptions = DEFAULT_ENGINE_OPTIONS,
        *,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.options = options
        self._client = client
        self._transport = transport
        if not self.enabled:
            logger.info("🔕 Віддалений рендер не налаштовано (немає API-ключа)")

    @property
    def enabled(self) -> bool:
        return self.options.render_enabled

    # ================================
    # 🔄 ПУБЛІЧНИЙ API
    # ================================
    async def render(self, url: str) -> Optional[FetchResult]:
        """Повертає відрендерений HTML або None."""
        if not self.enabled:
            return None

        logger.info("🛰️ Віддалений рендер для %s", url)
        if self._client is not None:
            return await self._post(self._client, url)
        async with httpx.AsyncClient(transport=self._transport) as client:
            return await self._post(client, url)

    async def render_metadata(self, url: str, pipeline: Optional[ExtractionPipeline] = None) -> Optional[ProductMetadata]:
        """
        Автономний режим: рендер + витягування.

        Повертає запис лише якщо знайдено назву, інакше None.
        """
        rendered = await self.render(url)
        if rendered is None:
            return None
        pipeline = pipeline or ExtractionPipeline(normalizer=FieldNormalizer(self.options))
        fields = pipeline.extract_all(Document.parse(rendered.html, self.options.html_parser), base_url=url)
        if not fields.title:
            logger.info("🪣 Рендер %s без назви → відповіді немає", url)
            return None
        return ProductMetadata(
            domain=derive_domain(url),
            original_url=url,
            title=fields.title,
            price=fields.price,
            image_url=fields.image_url,
            description=fields.description,
            source_strategy=SourceStrategy.REMOTE_RENDER,
        )

    # ================================
    # 🛠️ ВНУТРІШНЄ
    # ================================
    def _request_params(self) -> Dict[str, str]:
        params = {"token": str(self.options.render_api_key)}
        if self.options.render_proxy:
            params["proxy"] = self.options.render_proxy
        return params

    async def _post(self, client: httpx.AsyncClient, url: str) -> Optional[FetchResult]:
        payload: Dict[str, Any] = {
            "url": url,
            "content": True,
            "browserWSEndpoint": False,
            "cookies": False,
        }
        timeout = self.options.render_timeout_sec
        try:
            response = await asyncio.wait_for(
                client.post(
                    self.options.render_endpoint,
                    params=self._request_params(),
                    json=payload,
                    timeout=httpx.Timeout(timeout),
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("⏳ Рендер %s перевищив %.1fs", url, timeout, extra={"fetch_reason": FailureReason.TIMEOUT.value})
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            reason = classify_http_error(exc)
            logger.warning("⚠️ Рендер %s не вдався (%s): %s", url, reason.value, exc, extra={"fetch_reason": reason.value})
            return None

        if response.status_code != 200:
            logger.warning("↩️ Рендер %s: HTTP %s", url, response.status_code, extra={"http_status": response.status_code})
            return None
        try:
            data = response.json()
        except ValueError:
            logger.warning("⚠️ Рендер %s: відповідь не JSON", url)
            return None
        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, str) or not content.strip():
            logger.warning("🪣 Рендер %s: порожній content", url)
            return None

        logger.info("✅ Рендер %s: %d символів HTML", url, len(content))
        return FetchResult(html=content, source_strategy=SourceStrategy.REMOTE_RENDER, http_status=None, final_url=url)


__all__ = ["RemoteRenderFallback"]
