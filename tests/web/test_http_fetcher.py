"""
🧪 test_http_fetcher.py — unit-тести для HttpFetcher (httpx.MockTransport)

Перевіряє:
- 200 першим профілем завершує цикл
- 5xx і транспортні збої → наступний профіль
- 4xx: продовження за замовчуванням, зупинка за stop_on_client_error
- Ліміт редіректів і дедлайн
"""

import asyncio
import time

import httpx
import pytest

from product_scraper.domain.metadata.entities import FetchFailure, FetchResult, SourceStrategy
from product_scraper.infrastructure.parsers._infra_options import EngineOptions
from product_scraper.infrastructure.web.client_profiles import (
    DEFAULT_CLIENT_PROFILES,
    ClientProfile,
    ProfileRetryPolicy,
)
from product_scraper.infrastructure.web.http_fetcher import HttpFetcher
from product_scraper.shared.errors import FailureReason

pytestmark = pytest.mark.asyncio

URL = "https://shop.example.com/p/1"


class _Recorder:
    """Віддає відповіді по черзі й запамʼятовує User-Agent кожного запиту."""

    def __init__(self, *responses):
        self._responses = list(responses)
        self.user_agents = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.user_agents.append(request.headers.get("User-Agent"))
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _fetcher(handler, **opts) -> HttpFetcher:
    options = EngineOptions(**opts)
    return HttpFetcher(options, transport=httpx.MockTransport(handler))


async def test_first_profile_success_short_circuits():
    rec = _Recorder(httpx.Response(200, text="<html>ok</html>"))
    outcome = await _fetcher(rec).fetch(URL)

    assert isinstance(outcome, FetchResult)
    assert outcome.html == "<html>ok</html>"
    assert outcome.source_strategy is SourceStrategy.DIRECT_FETCH
    assert outcome.profile == "desktop-chrome-mac"
    assert rec.user_agents == [DEFAULT_CLIENT_PROFILES[0].user_agent]


async def test_browser_headers_are_sent():
    seen = {}

    def handler(request):
        seen["headers"] = request.headers
        return httpx.Response(200, text="ok")

    await _fetcher(handler).fetch(URL)
    headers = seen["headers"]
    assert headers["Accept-Language"] == "en-US,en;q=0.9"
    assert headers["Sec-Fetch-Mode"] == "navigate"
    assert headers["Upgrade-Insecure-Requests"] == "1"


async def test_server_error_and_timeout_move_to_next_profile():
    rec = _Recorder(
        httpx.Response(503),
        httpx.ConnectTimeout("slow"),
        httpx.Response(200, text="third"),
    )
    outcome = await _fetcher(rec).fetch(URL)

    assert isinstance(outcome, FetchResult)
    assert outcome.html == "third"
    assert outcome.profile == "mobile-safari-ios"
    assert len(rec.user_agents) == 3
    assert len(set(rec.user_agents)) == 3


async def test_forbidden_everywhere_returns_failure():
    rec = _Recorder(httpx.Response(403), httpx.Response(403), httpx.Response(403))
    outcome = await _fetcher(rec).fetch(URL)

    assert isinstance(outcome, FetchFailure)
    assert outcome.reason is FailureReason.HTTP_STATUS
    assert outcome.http_status == 403
    assert outcome.attempts == 3


async def test_stop_on_client_error_policy():
    rec = _Recorder(httpx.Response(404), httpx.Response(200, text="never"))
    outcome = await _fetcher(rec, stop_on_client_error=True).fetch(URL)

    assert isinstance(outcome, FetchFailure)
    assert outcome.http_status == 404
    assert len(rec.user_agents) == 1


async def test_connection_errors_everywhere():
    rec = _Recorder(*(httpx.ConnectError("refused") for _ in DEFAULT_CLIENT_PROFILES))
    outcome = await _fetcher(rec).fetch(URL)

    assert isinstance(outcome, FetchFailure)
    assert outcome.reason is FailureReason.CONNECTION


async def test_redirect_limit():
    def handler(request):
        return httpx.Response(302, headers={"Location": str(request.url.copy_with(path=request.url.path + "x"))})

    outcome = await _fetcher(handler, max_redirects=2).fetch(URL)
    assert isinstance(outcome, FetchFailure)
    assert outcome.reason is FailureReason.TOO_MANY_REDIRECTS


async def test_redirect_followed_within_limit():
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://shop.example.com/new"})
        return httpx.Response(200, text="moved here")

    outcome = await _fetcher(handler).fetch("https://shop.example.com/old")
    assert isinstance(outcome, FetchResult)
    assert outcome.final_url == "https://shop.example.com/new"


async def test_custom_profiles_are_data_driven():
    profiles = (ClientProfile(name="bot", user_agent="TestBot/1.0"),)
    rec = _Recorder(httpx.Response(200, text="ok"))
    fetcher = HttpFetcher(
        EngineOptions(),
        ProfileRetryPolicy.build(profiles),
        transport=httpx.MockTransport(rec),
    )
    outcome = await fetcher.fetch(URL)
    assert outcome.profile == "bot"
    assert rec.user_agents == ["TestBot/1.0"]


async def test_empty_profile_list():
    fetcher = HttpFetcher(EngineOptions(), ProfileRetryPolicy(profiles=()))
    outcome = await fetcher.fetch(URL)
    assert isinstance(outcome, FetchFailure)
    assert outcome.reason is FailureReason.NO_PROFILES


async def test_exhausted_deadline_stops_before_next_profile(monkeypatch):
    import product_scraper.infrastructure.web.http_fetcher as mod

    clock = iter([100.0, 100.0, 200.0])
    monkeypatch.setattr(mod, "monotonic", lambda: next(clock))

    rec = _Recorder(httpx.Response(500), httpx.Response(200, text="late"))
    outcome = await _fetcher(rec).fetch(URL, deadline=5)

    assert isinstance(outcome, FetchFailure)
    assert outcome.reason is FailureReason.TIMEOUT
    assert len(rec.user_agents) == 1


async def test_trickling_body_is_cut_by_attempt_timeout():
    # сервер шле тіло по байту раз на 0.3 с: жодна фаза httpx не перевищує таймаут,
    # але спроба в цілому мусить завершитися за fetch_timeout_sec
    handlers = []

    async def trickle(reader, writer):
        handlers.append(asyncio.current_task())
        await reader.readuntil(b"\r\n\r\n")
        writer.write(b"HTTP/1.1 200 OK\r\nContent-Type: text/html\r\nContent-Length: 10\r\n\r\n")
        await writer.drain()
        for _ in range(10):
            await asyncio.sleep(0.3)
            writer.write(b"x")
            await writer.drain()
        writer.close()

    server = await asyncio.start_server(trickle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    client = httpx.AsyncClient(trust_env=False)
    fetcher = HttpFetcher(
        EngineOptions(fetch_timeout_sec=0.5),
        ProfileRetryPolicy.build((ClientProfile(name="only", user_agent="TestBot/1.0"),)),
        client=client,
    )
    try:
        started = time.monotonic()
        outcome = await fetcher.fetch(f"http://127.0.0.1:{port}/slow")
        elapsed = time.monotonic() - started
    finally:
        await client.aclose()
        for task in handlers:
            task.cancel()
        await asyncio.gather(*handlers, return_exceptions=True)
        server.close()
        await server.wait_closed()

    assert isinstance(outcome, FetchFailure)
    assert outcome.reason is FailureReason.TIMEOUT
    assert elapsed < 1.5


async def test_stalled_attempt_moves_to_next_profile():
    calls = []

    async def handler(request):
        calls.append(request.headers["User-Agent"])
        if len(calls) == 1:
            await asyncio.sleep(5)
        return httpx.Response(200, text="second")

    outcome = await _fetcher(handler, fetch_timeout_sec=0.2).fetch(URL)

    assert isinstance(outcome, FetchResult)
    assert outcome.html == "second"
    assert len(calls) == 2
