"""Base class for legal databases that are only reachable as rendered HTML."""

from __future__ import annotations

import logging
from typing import ClassVar
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..models.query import Category, Jurisdiction, Query
from ..models.record import Record
from .base import BaseSource
from .extractor import Page, ResilientExtractor, SelectorSet, StaticPage
from .guard import RateIdentityGuard

logger = logging.getLogger(__name__)


class BaseHTMLSourceAdapter(BaseSource):
    """Base adapter for scraped sources.

    Provides the common scrape sequence:
    - randomized delay and fixed identity from the shared guard
    - one isolated browser session per call, always closed
    - navigation to a query-escaped search URL
    - extraction with the site's selector set

    With ``Settings.use_browser`` off, the search page is fetched over plain
    HTTP and parsed with BeautifulSoup instead; this only works for sites that
    render results server side.
    """

    search_path: ClassVar[str] = ""
    query_param: ClassVar[str] = "q"
    selectors: ClassVar[SelectorSet]
    default_category: ClassVar[Category | None] = None
    default_jurisdiction: ClassVar[Jurisdiction | None] = None

    def __init__(
        self,
        settings: Settings | None = None,
        guard: RateIdentityGuard | None = None,
        extractor: ResilientExtractor | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(settings=settings, client=client)
        self.guard = guard or RateIdentityGuard(self.settings)
        self.extractor = extractor or ResilientExtractor(self.settings.selector_timeout_ms)

    def search_params(self, query: Query) -> dict[str, str]:
        return {self.query_param: query.text}

    def search_url(self, query: Query) -> str:
        return f"{self.base_url}{self.search_path}?{urlencode(self.search_params(query))}"

    async def _search(self, query: Query, limit: int) -> list[Record]:
        url = self.search_url(query)
        await self.guard.before_request()

        if not self.settings.use_browser:
            resp = await self._request(f"{self.base_url}{self.search_path}", params=self.search_params(query))
            page = StaticPage(resp.text, url=str(resp.url))
            return await self._extract(page, limit)

        async with self.guard.new_session() as session:
            await session.goto(url)
            return await self._extract(session.page, limit)

    async def _extract(self, page: Page, limit: int) -> list[Record]:
        rows = await self.extractor.extract_rows(page, self.selectors, limit)
        records: list[Record] = []
        for row in rows:
            try:
                record = self._row_to_record(row, page.url)
            except ValidationError as e:
                logger.debug(f"{self.name}: dropping row {row.get('title')!r}: {e}")
                continue
            records.append(record)
        return records

    def _row_to_record(self, row: dict[str, str | None], page_url: str) -> Record:
        """Map an extracted row to a record; sites with richer rows override this."""
        return self.extractor.row_to_record(
            row,
            fallback_url=page_url,
            source=self.name,
            category=self.default_category,
            jurisdiction=self.default_jurisdiction,
        )
