# 🛍️ product_scraper/services/extraction_engine.py
"""
🛍️ ExtractionEngine — фасад витягування метаданих товару за URL.

🔹 Пряме завантаження → (за провалу) віддалений рендер → розбір → екстрактори → нормалізація.
🔹 Ніколи не падає через якість сторінки: у найгіршому разі повертає запис лише з доменом.
🔹 Єдина помилка рівня запиту — `InvalidUrlError` (домен неможливо визначити).
🔹 Дедлайн охоплює весь виклик; після нього запит скасовується і повертається деградований запис.
🔹 Стан між викликами не зберігається (опції, профілі та селектори іммутабельні).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio															# ⏳ Дедлайни та скасування
import logging															# 🧾 Логування
from typing import Any, Mapping, Optional								# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from product_scraper.config.config_service import ConfigService
from product_scraper.domain.metadata.entities import (
    ExtractionRequest,
    FetchResult,
    ProductMetadata,
    SourceStrategy,
)
from product_scraper.domain.metadata.interfaces import IPageFetcher, IRenderFallback
from product_scraper.infrastructure.parsers._infra_options import EngineOptions
from product_scraper.infrastructure.parsers.document import Document
from product_scraper.infrastructure.parsers.extractors.base import DEFAULT_SELECTORS, Selectors
from product_scraper.infrastructure.parsers.normalizer import FieldNormalizer
from product_scraper.infrastructure.parsers.pipeline import ExtractionPipeline
from product_scraper.infrastructure.web.http_fetcher import HttpFetcher
from product_scraper.infrastructure.web.render_fallback import RemoteRenderFallback
from product_scraper.shared.utils.logger import LOG_NAME, init_logging_from_config

logger = logging.getLogger(f"{LOG_NAME}.engine")


# ================================
# 🛍️ РУШІЙ
# ================================
class ExtractionEngine:
    """🛍️ Stateless-рушій: один екземпляр обслуговує довільну кількість паралельних викликів."""

    def __init__(
        self,
        options: Optional[EngineOptions] = None,
        *,
        selectors: Selectors = DEFAULT_SELECTORS,
        fetcher: Optional[IPageFetcher] = None,
        render_fallback: Optional[IRenderFallback] = None,
        pipeline: Optional[ExtractionPipeline] = None,
    ) -> None:
        self.options = options or EngineOptions.default()
        self.fetcher = fetcher or HttpFetcher(self.options)
        self.render_fallback = render_fallback or RemoteRenderFallback(self.options)
        self.pipeline = pipeline or ExtractionPipeline(selectors, FieldNormalizer(self.options))
        logger.info("🛍️ ExtractionEngine ініціалізовано: %s", self.options.summary())

    # ================================
    # 🔄 ПУБЛІЧНИЙ API
    # ================================
    async def extract(self, url: str, deadline: Optional[float] = None) -> ProductMetadata:
        """
        Повертає best-effort метадані товару.

        Args:
            url: Абсолютний URL сторінки товару.
            deadline: Бюджет у секундах на весь виклик (None → `default_deadline_sec`).

        Raises:
            InvalidUrlError: URL без схеми або хоста.
        """
        request = ExtractionRequest(url=url, deadline=deadline if deadline is not None else self.options.default_deadline_sec)
        if request.deadline is None:
            return await self._extract_safe(request)
        try:
            return await asyncio.wait_for(self._extract_safe(request), timeout=request.deadline)
        except asyncio.TimeoutError:
            logger.warning("⏳ Дедлайн %.2fs вичерпано для %s → деградований запис", request.deadline, request.url)
            return ProductMetadata.degraded(request.url, request.domain)

    async def prefill(self, url: str) -> ProductMetadata:
        """🖱️ Швидкий виклик для інтерактивного префілу форми (дедлайн `interactive_deadline_sec`)."""
        return await self.extract(url, deadline=self.options.interactive_deadline_sec)

    def extract_sync(self, url: str, deadline: Optional[float] = None) -> ProductMetadata:
        """🧵 Блокуюча обгортка для синхронного коду (не викликати зсередини event loop)."""
        return asyncio.run(self.extract(url, deadline))

    def extract_from_html(
        self,
        html: str,
        url: str,
        source_strategy: SourceStrategy = SourceStrategy.DIRECT_FETCH,
    ) -> ProductMetadata:
        """🥣 Витягування з уже отриманого HTML (без мережі)."""
        request = ExtractionRequest(url=url)
        return self._build(request, html, FetchResult(html=html, source_strategy=source_strategy))

    # ================================
    # 🛠️ ВНУТРІШНЄ
    # ================================
    async def _extract_safe(self, request: ExtractionRequest) -> ProductMetadata:
        """Усі несподівані збої всередині одного виклику → деградований запис."""
        try:
            return await self._extract(request)
        except asyncio.CancelledError:
            raise
        except Exception:	# noqa: BLE001
            logger.exception("❌ Неочікувана помилка під час витягування %s", request.url)
            return ProductMetadata.degraded(request.url, request.domain)

    async def _extract(self, request: ExtractionRequest) -> ProductMetadata:
        outcome = await self.fetcher.fetch(request.url, request.deadline)
        fetched: Optional[FetchResult] = outcome if isinstance(outcome, FetchResult) else None

        if fetched is None:
            logger.info("🛰️ Пряме завантаження %s не вдалося (%s) → рендер", request.url, outcome.reason.value)
            fetched = await self.render_fallback.render(request.url)

        if fetched is None:
            logger.warning("🪣 HTML для %s не отримано → запис лише з доменом", request.url)
            return ProductMetadata.degraded(request.url, request.domain)

        return self._build(request, fetched.html, fetched)

    def _build(self, request: ExtractionRequest, html: str, fetched: FetchResult) -> ProductMetadata:
        document = Document.parse(html, self.options.html_parser)
        fields = self.pipeline.extract_all(document, base_url=request.url)
        metadata = ProductMetadata(
            domain=request.domain,
            original_url=request.url,
            title=fields.title,
            price=fields.price,
            image_url=fields.image_url,
            description=fields.description,
            source_strategy=fetched.source_strategy,
        )
        logger.info(
            "✅ %s: title=%s price=%s image=%s source=%s",
            request.domain,
            bool(metadata.title),
            metadata.price,
            bool(metadata.image_url),
            metadata.source_strategy.value if metadata.source_strategy else "-",
        )
        return metadata


# ================================
# 🏭 ФАБРИКА
# ================================
def build_engine(
    config_service: Optional[ConfigService] = None,
    *,
    configure_logging: bool = True,
    **overrides: Any,
) -> ExtractionEngine:
    """
    🏭 Збирає рушій із `ConfigService` (розділи `logging`, `engine`, `render`, `parser.selectors`).

    `overrides` перекривають значення з конфігурації (None ігнорується).
    `configure_logging=False` лишає логування застосунку-хоста як є.
    """
    config = config_service or ConfigService()
    if configure_logging:
        init_logging_from_config(config.get("logging", {}) or {})
    engine_node: Mapping[str, Any] = config.get("engine", {}) or {}
    render_node: Mapping[str, Any] = config.get("render", {}) or {}

    options = EngineOptions.from_dict(
        {
            **engine_node,
            "render_endpoint": render_node.get("endpoint"),
            "render_proxy": render_node.get("proxy"),
            "render_timeout_sec": render_node.get("timeout_sec"),
            "render_api_key": render_node.get("api_key"),
        }
    ).merge(**overrides)
    selectors = DEFAULT_SELECTORS.with_overrides(config.get("parser.selectors", {}) or {})
    return ExtractionEngine(options, selectors=selectors)


__all__ = ["ExtractionEngine", "build_engine"]
