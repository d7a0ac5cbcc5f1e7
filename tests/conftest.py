"""Shared fixtures for legal research tests."""
from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
import pytest

from legal_research.config import Settings
from legal_research.models.query import Category, Query
from legal_research.models.record import Record
from legal_research.sources.base import BaseSource


@pytest.fixture
def settings() -> Settings:
    """Fast settings: no retries, no scrape delay, plain HTTP instead of a browser."""
    return Settings(
        max_attempts=1,
        retry_initial_backoff=0.01,
        retry_max_backoff=0.02,
        delay_min_ms=0,
        delay_max_ms=0,
        use_browser=False,
        selector_timeout_ms=0,
    )


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def make_records(source: str, count: int, prefix: str = "Record title") -> list[Record]:
    return [
        Record(title=f"{prefix} {i}", url=f"https://example.test/{source}/{i}", category=Category.BILL, source=source)
        for i in range(count)
    ]


class FakeSource(BaseSource):
    """In-memory source: returns canned records, raises, or stalls."""

    def __init__(
        self,
        name: str,
        records: list[Record] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
        supports_recent: bool = False,
    ) -> None:
        super().__init__(Settings(max_attempts=1))
        self.name = name
        self.supports_recent = supports_recent
        self._records = records or []
        self._error = error
        self._delay = delay
        self.requested_limits: list[int] = []
        self.cancelled = False
        self.closed = False

    async def _search(self, query: Query, limit: int) -> list[Record]:
        self.requested_limits.append(limit)
        try:
            if self._delay:
                await asyncio.sleep(self._delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self._error is not None:
            raise self._error
        return list(self._records)

    async def _recent(self, query: Query, limit: int) -> list[Record]:
        return await self._search(query, limit)

    async def close(self) -> None:
        self.closed = True
