"""Unified search across every configured legal source.

Fans one query out to all adapters in parallel, waits for every call to
settle (or for the overall deadline), and merges what came back in adapter
configuration order.
"""

from __future__ import annotations

import asyncio
import math
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, Field

from legal_research.config import Settings
from legal_research.errors import ErrorType, classify_exception
from legal_research.models.query import Query
from legal_research.models.record import Record, SourceResult, SourceStatus

if TYPE_CHECKING:
    from legal_research.sources.base import BaseSource

logger = structlog.get_logger(__name__)

TIMEOUT_REASON = "timeout"

SourceCall = Callable[["BaseSource", int], Awaitable[SourceResult]]


# Room beyond the scrape worst case for session start-up and row mapping.
SCRAPE_SLACK_SECONDS = 12.0
# Room beyond the per-source timeout for cancellation and session teardown.
DEADLINE_SLACK_SECONDS = 15.0


class AggregatorConfig(BaseModel):
    """Configuration for the aggregator."""
    timeout_per_source: float = Field(default=60.0, gt=0, description="Timeout per source in seconds")
    overall_timeout: float = Field(default=75.0, gt=0, description="Wall-clock budget for one fan-out")
    default_limit: int = Field(default=20, ge=1, description="Overall result count when none is given")

    @classmethod
    def for_settings(cls, settings: Settings, **overrides) -> AggregatorConfig:
        """Timeouts long enough that a scrape ending in an extraction miss still settles as Empty."""
        per_source = settings.scrape_budget_seconds + SCRAPE_SLACK_SECONDS
        values = {"timeout_per_source": per_source, "overall_timeout": per_source + DEADLINE_SLACK_SECONDS}
        values.update(overrides)
        return cls(**values)


@dataclass
class MergedResult:
    """Combined result from every adapter that was asked."""
    query: Query
    groups: list[SourceResult] = field(default_factory=list)
    per_source_limit: int = 0
    total_search_time_ms: float = 0.0

    @property
    def records(self) -> list[Record]:
        return [r for group in self.groups for r in group.records]

    @property
    def by_source(self) -> dict[str, SourceResult]:
        return {g.source: g for g in self.groups}

    @property
    def counts(self) -> dict[str, int]:
        """Records per source; Empty and Failed sources report zero."""
        return {g.source: g.count for g in self.groups}

    @property
    def sources_searched(self) -> list[str]:
        return [g.source for g in self.groups if g.status is SourceStatus.OK]

    @property
    def sources_failed(self) -> list[str]:
        return [g.source for g in self.groups if g.is_failed]

    @property
    def sources_empty(self) -> list[str]:
        return [g.source for g in self.groups if g.status is SourceStatus.EMPTY]

    @property
    def total_count(self) -> int:
        return sum(g.count for g in self.groups)

    @property
    def no_results(self) -> bool:
        """True when every adapter came back Empty or Failed."""
        return self.total_count == 0


def split_limit(limit: int, source_count: int) -> int:
    """Even per-source share of an overall limit, rounded up."""
    if source_count <= 0:
        return 0
    return math.ceil(max(1, limit) / source_count)


def settle(name: str, task: asyncio.Task[SourceResult], timed_out: bool = False) -> SourceResult:
    """Turn a finished (or abandoned) task into a tagged outcome."""
    if timed_out or task.cancelled():
        return SourceResult.failed(name, TIMEOUT_REASON, ErrorType.TIMEOUT)
    exc = task.exception()
    if exc is not None:
        error_type, reason = classify_exception(exc)
        logger.warning("aggregator.source_raised", source=name, error=reason)
        return SourceResult.failed(name, reason, error_type)
    return task.result()


class SourceAggregator:
    """Aggregator for legal research across multiple sources.

    Every adapter is asked on every call; adapters whose category or
    jurisdiction filters exclude the query answer Empty without any I/O, so
    the per-source share depends only on how many adapters are configured.

    Example:
        async with create_default_aggregator() as agg:
            merged = await agg.search_all(Query(text="immigration"), limit=10)
            for record in merged.records:
                print(record.source, record.title)
    """

    def __init__(
        self,
        config: AggregatorConfig | None = None,
        sources: Iterable[BaseSource] | None = None,
    ) -> None:
        self.config = config or AggregatorConfig()
        self._sources: dict[str, BaseSource] = {}
        for source in sources or ():
            self.register_source(source)

    def register_source(self, source: BaseSource) -> None:
        """Register an adapter; registration order is merge order."""
        self._sources[source.name.lower()] = source

    def unregister_source(self, source_name: str) -> None:
        self._sources.pop(source_name.lower(), None)

    def get_source(self, source_name: str) -> BaseSource | None:
        return self._sources.get(source_name.lower())

    @property
    def available_sources(self) -> list[str]:
        """Get list of registered source names."""
        return list(self._sources.keys())

    def _select(self, names: Iterable[str] | None) -> dict[str, BaseSource]:
        if not names:
            return dict(self._sources)
        wanted = {n.lower() for n in names}
        return {k: v for k, v in self._sources.items() if k in wanted}

    async def search_all(
        self,
        query: Query,
        limit: int | None = None,
        sources: list[str] | None = None,
    ) -> MergedResult:
        """Search every selected source and merge the results.

        Args:
            query: Search text and optional filters
            limit: Overall result count, split evenly across sources
            sources: Restrict the fan-out to these source names

        Returns:
            MergedResult with at most ``ceil(limit / N)`` records per source
        """
        selected = self._select(sources)
        return await self._run(query, limit, selected, lambda src, n: src.search(query, n))

    async def recent_all(
        self,
        query: Query | None = None,
        limit: int | None = None,
    ) -> MergedResult:
        """List the newest material from every source that supports it."""
        query = query or Query(text="")
        selected = {k: v for k, v in self._sources.items() if v.supports_recent}
        return await self._run(query, limit, selected, lambda src, n: src.recent(query, n))

    async def _run(
        self,
        query: Query,
        limit: int | None,
        selected: dict[str, BaseSource],
        call: SourceCall,
    ) -> MergedResult:
        start = time.monotonic()
        overall = limit if limit is not None else self.config.default_limit
        share = split_limit(overall, len(selected))

        outcomes = await self._fan_out(selected, call, share) if selected else {}
        # Configuration order, each group capped at its share.
        groups = [outcomes[name].truncated(share) for name in selected]

        merged = MergedResult(
            query=query,
            groups=groups,
            per_source_limit=share,
            total_search_time_ms=(time.monotonic() - start) * 1000,
        )
        logger.info(
            "aggregator.merged",
            query=query.text,
            per_source=share,
            total=merged.total_count,
            failed=merged.sources_failed,
            empty=merged.sources_empty,
        )
        return merged

    async def _fan_out(
        self,
        selected: dict[str, BaseSource],
        call: SourceCall,
        share: int,
    ) -> dict[str, SourceResult]:
        """All-settled barrier with an overall deadline."""
        tasks = {
            name: asyncio.create_task(self._call_one(name, source, call, share), name=f"source:{name}")
            for name, source in selected.items()
        }
        _, pending = await asyncio.wait(tasks.values(), timeout=self.config.overall_timeout)

        for task in pending:
            task.cancel()
        if pending:
            # Let cancellation unwind (browser sessions close on the way out).
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(
                "aggregator.deadline_exceeded",
                timeout_seconds=self.config.overall_timeout,
                pending=[t.get_name() for t in pending],
            )

        return {name: settle(name, task, timed_out=task in pending) for name, task in tasks.items()}

    async def _call_one(
        self,
        name: str,
        source: BaseSource,
        call: SourceCall,
        share: int,
    ) -> SourceResult:
        start = time.monotonic()
        try:
            return await asyncio.wait_for(call(source, share), timeout=self.config.timeout_per_source)
        except (asyncio.TimeoutError, TimeoutError):
            logger.warning(
                "aggregator.source_timeout", source=name, timeout_seconds=self.config.timeout_per_source
            )
            return SourceResult.failed(
                name, TIMEOUT_REASON, ErrorType.TIMEOUT, elapsed_ms=(time.monotonic() - start) * 1000
            )

    async def close(self) -> None:
        """Close all source connections."""
        for source in self._sources.values():
            await source.close()

    async def __aenter__(self) -> SourceAggregator:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False


def create_default_aggregator(
    settings: Settings | None = None,
    config: AggregatorConfig | None = None,
) -> SourceAggregator:
    """Create an aggregator with every built-in source registered."""
    from legal_research.sources import create_default_sources

    settings = settings or Settings()
    config = config or AggregatorConfig.for_settings(settings)
    return SourceAggregator(config, create_default_sources(settings))
