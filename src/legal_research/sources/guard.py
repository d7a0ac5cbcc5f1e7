"""Rate and identity guard for scraping adapters.

Every scrape is preceded by a randomized pause and runs in a fresh, isolated
Playwright browser with a fixed identity. Browser processes are released on
every exit path, including failures while the session is still opening.

Usage:
    guard = RateIdentityGuard(settings)
    await guard.before_request()
    async with guard.new_session() as session:
        await session.goto(url)
        ...
"""
from __future__ import annotations

import asyncio
import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import structlog
from playwright.async_api import async_playwright

from legal_research.config import Settings

logger = structlog.get_logger(__name__)


@dataclass
class SessionHandle:
    """An open page owned by exactly one adapter call."""

    page: Any
    navigation_timeout_ms: int

    async def goto(self, url: str) -> Any:
        return await self.page.goto(
            url, wait_until="domcontentloaded", timeout=self.navigation_timeout_ms
        )


class RateIdentityGuard:
    """Randomized delay plus fixed browser identity, shared by scraping adapters.

    Holds no per-call state; concurrent calls each get their own browser.
    """

    def __init__(self, settings: Settings | None = None, rng: random.Random | None = None) -> None:
        self.settings = settings or Settings()
        self._rng = rng or random.Random()

    def next_delay(self) -> float:
        """Delay in seconds, uniform over the configured millisecond window."""
        low, high = self.settings.delay_min_ms, self.settings.delay_max_ms
        return self._rng.uniform(low, high) / 1000

    async def before_request(self) -> None:
        delay = self.next_delay()
        if delay > 0:
            logger.debug("scrape_delay", seconds=round(delay, 3))
            await asyncio.sleep(delay)

    @property
    def launch_args(self) -> list[str]:
        return [*self.settings.browser_args, f"--user-agent={self.settings.user_agent}"]

    @asynccontextmanager
    async def new_session(self) -> AsyncIterator[SessionHandle]:
        """Open an isolated browser page; always close whatever got opened."""
        cfg = self.settings
        playwright = browser = context = page = None
        try:
            playwright = await async_playwright().start()
            browser = await playwright.chromium.launch(
                headless=cfg.headless,
                args=self.launch_args,
            )
            context = await browser.new_context(
                viewport={"width": cfg.viewport_width, "height": cfg.viewport_height},
                user_agent=cfg.user_agent,
            )
            page = await context.new_page()
            yield SessionHandle(page=page, navigation_timeout_ms=cfg.navigation_timeout_ms)
        finally:
            await _release(page, context, browser, playwright)


async def _release(page: Any, context: Any, browser: Any, playwright: Any) -> None:
    """Close resources innermost first; one failing close does not skip the rest."""
    steps = (
        ("page", page, "close"),
        ("context", context, "close"),
        ("browser", browser, "close"),
        ("playwright", playwright, "stop"),
    )
    for label, resource, method in steps:
        if resource is None:
            continue
        try:
            await getattr(resource, method)()
        except Exception as e:
            logger.warning("session_release_failed", resource=label, error=str(e))
