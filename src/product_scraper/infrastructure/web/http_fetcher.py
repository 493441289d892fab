# 🌐 product_scraper/infrastructure/web/http_fetcher.py
"""
🌐 HttpFetcher — пряме завантаження HTML сторінки товару через `httpx`.

🔹 Перебирає профілі клієнта строго послідовно; перший `200` завершує цикл.
🔹 Таймаут (15 с) обмежує всю спробу через `asyncio.wait_for`, включно з повільним тілом відповіді.
🔹 Ліміт редіректів (10); опційний дедлайн урізає таймаут.
🔹 5xx і транспортні збої → наступний профіль; 4xx → за політикою `stop_on_client_error`.
🔹 Ніколи не кидає мережевих винятків: повертає `FetchResult` або `FetchFailure`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import asyncio															# ⏳ Жорстка межа на всю спробу
import logging															# 🧾 Логування спроб
from time import monotonic												# ⏱️ Монотонний годинник для дедлайну
from typing import Optional											# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from product_scraper.domain.metadata.entities import (
    FetchFailure,
    FetchOutcome,
    FetchResult,
    SourceStrategy,
)
from product_scraper.domain.metadata.interfaces import IPageFetcher
from product_scraper.infrastructure.parsers._infra_options import DEFAULT_ENGINE_OPTIONS, EngineOptions
from product_scraper.infrastructure.web.client_profiles import ClientProfile, ProfileRetryPolicy
from product_scraper.shared.errors import FailureReason, classify_http_error
from product_scraper.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.web")							# 🧾 Локальний логер модуля


class HttpFetcher(IPageFetcher):
    """🌐 Завантажує сторінку, перебираючи профілі клієнта."""

    def __init__(
        self,
        options: EngineOptions = DEFAULT_ENGINE_OPTIONS,
        policy: Optional[ProfileRetryPolicy] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.options = options
        self.policy = policy or ProfileRetryPolicy.build(stop_on_client_error=options.stop_on_client_error)
        self._client = client											# 🔌 Зовнішній клієнт (не закриваємо)
        self._transport = transport									# 🧪 Транспорт для тестів
        logger.debug(
            "⚙️ HttpFetcher init timeout=%.1fs redirects=%d profiles=%s stop_on_4xx=%s",
            options.fetch_timeout_sec,
            options.max_redirects,
            [p.name for p in self.policy.profiles],
            self.policy.stop_on_client_error,
        )

    # ================================
    # 🔄 ПУБЛІЧНИЙ API
    # ================================
    async def fetch(self, url: str, deadline: Optional[float] = None) -> FetchOutcome:
        """
        Повертає HTML першого профілю, що отримав `200`.

        Args:
            url: Абсолютний URL сторінки.
            deadline: Бюджет у секундах на весь цикл (None → лише таймаут спроби).
        """
        if not self.policy.profiles:
            logger.warning("🪣 Немає жодного профілю клієнта для %s", url)
            return FetchFailure(reason=FailureReason.NO_PROFILES, detail="empty profile list")

        if self._client is not None:
            return await self._run_profiles(self._client, url, deadline)
        async with httpx.AsyncClient(
            follow_redirects=True,
            max_redirects=self.options.max_redirects,
            transport=self._transport,
        ) as client:
            return await self._run_profiles(client, url, deadline)

    # ================================
    # 🔁 ЦИКЛ ПРОФІЛІВ
    # ================================
    async def _run_profiles(self, client: httpx.AsyncClient, url: str, deadline: Optional[float]) -> FetchOutcome:
        ends_at = monotonic() + deadline if deadline is not None else None
        last_failure = FetchFailure(reason=FailureReason.NETWORK)
        total = len(self.policy.profiles)

        for attempt, profile in enumerate(self.policy.profiles, start=1):
            timeout = self.options.fetch_timeout_sec
            if ends_at is not None:
                remaining = ends_at - monotonic()
                if remaining <= 0:
                    logger.info("⏳ Дедлайн вичерпано перед профілем %s (%s)", profile.name, url)
                    return FetchFailure(
                        reason=FailureReason.TIMEOUT,
                        http_status=last_failure.http_status,
                        attempts=attempt - 1,
                        detail="deadline exhausted",
                    )
                timeout = min(timeout, remaining)

            outcome = await self._attempt(client, url, profile, timeout, attempt, total)
            if isinstance(outcome, FetchResult):
                return outcome

            last_failure = outcome
            if outcome.reason is FailureReason.HTTP_STATUS and outcome.http_status is not None:
                if not self.policy.should_continue(outcome.http_status):
                    logger.info("🛑 %s: статус %s, перебір профілів зупинено", url, outcome.http_status)
                    break

        logger.warning(
            "❌ Жоден профіль не отримав 200 для %s (reason=%s, status=%s)",
            url,
            last_failure.reason.value,
            last_failure.http_status,
            extra={"fetch_reason": last_failure.reason.value, "http_status": last_failure.http_status},
        )
        return last_failure

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        url: str,
        profile: ClientProfile,
        timeout: float,
        attempt: int,
        total: int,
    ) -> FetchOutcome:
        """Одна спроба одним профілем; `timeout` обмежує її цілком, включно з читанням тіла."""
        try:
            response = await asyncio.wait_for(
                client.get(url, headers=profile.headers(), timeout=httpx.Timeout(timeout)),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "⏳ Спроба %s перевищила %.2fs [profile=%s %d/%d]",
                url, timeout, profile.name, attempt, total,
                extra={"fetch_reason": FailureReason.TIMEOUT.value, "profile": profile.name},
            )
            return FetchFailure(reason=FailureReason.TIMEOUT, attempts=attempt, detail=f"attempt exceeded {timeout:.2f}s")
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            reason = classify_http_error(exc)
            logger.warning(
                "⚠️ %s під час завантаження %s [profile=%s %d/%d]: %s",
                reason.value, url, profile.name, attempt, total, exc,
                extra={"fetch_reason": reason.value, "profile": profile.name},
            )
            return FetchFailure(reason=reason, attempts=attempt, detail=str(exc))

        status = response.status_code
        if ProfileRetryPolicy.is_success(status):
            logger.info("✅ %s отримано профілем %s (%d байт)", url, profile.name, len(response.content))
            return FetchResult(
                html=response.text,
                source_strategy=SourceStrategy.DIRECT_FETCH,
                http_status=status,
                final_url=str(response.url),
                profile=profile.name,
            )

        logger.info(
            "↩️ %s: HTTP %s [profile=%s %d/%d]",
            url, status, profile.name, attempt, total,
            extra={"http_status": status, "profile": profile.name},
        )
        return FetchFailure(reason=FailureReason.HTTP_STATUS, http_status=status, attempts=attempt)


__all__ = ["HttpFetcher"]
