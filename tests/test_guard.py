"""Tests for randomized delays and browser session lifecycle."""
from __future__ import annotations

import random
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from legal_research.config import DEFAULT_USER_AGENT, Settings
from legal_research.models import Query, SourceStatus
from legal_research.sources import AustLIISource, RateIdentityGuard
from legal_research.sources.extractor import StaticPage

AUSTLII_HTML = """
<ol class="search-results">
  <li><a class="title" href="/au/legis/cth/consol_act/ma1958118/">Migration Act 1958</a>
      <span class="database">Commonwealth Consolidated Acts</span></li>
</ol>
"""


def _mock_playwright(page=None, new_context_error: Exception | None = None):
    """Build a fake ``async_playwright`` factory and the objects it hands out."""
    page = page or AsyncMock()
    context = AsyncMock()
    context.new_page.return_value = page
    browser = AsyncMock()
    if new_context_error is not None:
        browser.new_context.side_effect = new_context_error
    else:
        browser.new_context.return_value = context
    pw = AsyncMock()
    pw.chromium.launch.return_value = browser
    starter = MagicMock()
    starter.start = AsyncMock(return_value=pw)
    return MagicMock(return_value=starter), pw, browser, context, page


class TestDelay:
    def test_default_window(self):
        guard = RateIdentityGuard(Settings(), rng=random.Random(7))
        delays = [guard.next_delay() for _ in range(200)]
        assert all(1.0 <= d <= 3.0 for d in delays)
        assert len(set(delays)) > 1

    def test_zero_window(self):
        guard = RateIdentityGuard(Settings(delay_min_ms=0, delay_max_ms=0))
        assert guard.next_delay() == 0

    def test_invalid_window_rejected(self):
        with pytest.raises(ValueError):
            Settings(delay_min_ms=3000, delay_max_ms=1000)

    @pytest.mark.asyncio
    async def test_before_request_sleeps(self):
        guard = RateIdentityGuard(Settings(delay_min_ms=1500, delay_max_ms=1500))
        with patch("legal_research.sources.guard.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await guard.before_request()
        sleep.assert_awaited_once_with(1.5)


class TestIdentity:
    def test_launch_args(self):
        guard = RateIdentityGuard(Settings())
        assert "--no-sandbox" in guard.launch_args
        assert "--disable-dev-shm-usage" in guard.launch_args
        assert f"--user-agent={DEFAULT_USER_AGENT}" in guard.launch_args


class TestSession:
    @pytest.mark.asyncio
    async def test_session_opened_with_identity_and_closed(self):
        factory, pw, browser, context, page = _mock_playwright()
        guard = RateIdentityGuard(Settings(viewport_width=1280, viewport_height=720))

        with patch("legal_research.sources.guard.async_playwright", factory):
            async with guard.new_session() as session:
                assert session.page is page

        pw.chromium.launch.assert_awaited_once_with(headless=True, args=guard.launch_args)
        browser.new_context.assert_awaited_once_with(
            viewport={"width": 1280, "height": 720}, user_agent=DEFAULT_USER_AGENT
        )
        page.close.assert_awaited_once()
        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()
        pw.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_partial_open_is_released(self):
        factory, pw, browser, context, page = _mock_playwright(
            new_context_error=RuntimeError("context refused")
        )
        guard = RateIdentityGuard(Settings())

        with patch("legal_research.sources.guard.async_playwright", factory):
            with pytest.raises(RuntimeError):
                async with guard.new_session():
                    pass

        browser.close.assert_awaited_once()
        pw.stop.assert_awaited_once()
        context.close.assert_not_awaited()
        page.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failing_close_does_not_skip_the_rest(self):
        factory, pw, browser, context, page = _mock_playwright()
        browser.close.side_effect = RuntimeError("already gone")
        guard = RateIdentityGuard(Settings())

        with patch("legal_research.sources.guard.async_playwright", factory):
            async with guard.new_session():
                pass

        pw.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_session_closed_when_body_raises(self):
        factory, pw, browser, context, page = _mock_playwright()
        guard = RateIdentityGuard(Settings())

        with patch("legal_research.sources.guard.async_playwright", factory):
            with pytest.raises(ValueError):
                async with guard.new_session():
                    raise ValueError("extraction blew up")

        page.close.assert_awaited_once()
        pw.stop.assert_awaited_once()


class TestScrapingAdapterSessions:
    @pytest.mark.asyncio
    async def test_session_open_failure_reports_failed(self):
        factory, pw, browser, _, _ = _mock_playwright(new_context_error=RuntimeError("launch failed"))
        source = AustLIISource(Settings(delay_min_ms=0, delay_max_ms=0))

        with patch("legal_research.sources.guard.async_playwright", factory):
            result = await source.search(Query(text="migration"))

        assert result.status is SourceStatus.FAILED
        assert result.reason == "launch failed"
        browser.close.assert_awaited_once()
        pw.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_browser_path_extracts_from_page(self):
        page = StaticPage(AUSTLII_HTML, url="https://www.austlii.edu.au/cgi-bin/sinosrch.cgi")
        page.goto = AsyncMock()
        page.close = AsyncMock()
        factory, pw, _, _, _ = _mock_playwright(page=page)
        settings = Settings(delay_min_ms=0, delay_max_ms=0, selector_timeout_ms=0)
        source = AustLIISource(settings)

        with patch("legal_research.sources.guard.async_playwright", factory):
            result = await source.search(Query(text="migration act"), limit=5)

        assert result.status is SourceStatus.OK
        assert [r.title for r in result.records] == ["Migration Act 1958"]
        assert result.records[0].url == "https://www.austlii.edu.au/au/legis/cth/consol_act/ma1958118/"
        url = page.goto.await_args.args[0]
        assert url.startswith("https://www.austlii.edu.au/cgi-bin/sinosrch.cgi?")
        assert "query=migration+act" in url
        page.close.assert_awaited_once()
        pw.stop.assert_awaited_once()
