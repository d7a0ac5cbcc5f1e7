"""Resilient extraction of search results from unstable markup.

Legal-database sites change their layouts without notice, so every logical
field is described by a ranked list of alternative CSS selectors. A single
first-match-wins function resolves each list; per-site configuration stays
pure data.

Works against a live Playwright page or a :class:`StaticPage` built from
server-rendered HTML. Both expose the same small surface:

    page.url
    await page.query_selector_all(selector)
    await page.wait_for_selector(selector, timeout=ms, state="attached")
    await element.query_selector(selector)
    await element.inner_text()
    await element.get_attribute(name)
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from legal_research.models.query import Category, Jurisdiction
from legal_research.models.record import MIN_TITLE_LENGTH, Record
from legal_research.normalize import infer_category, truncate

logger = logging.getLogger(__name__)

DEFAULT_WAIT_MS = 15000

_URL_ATTRIBUTES = frozenset({"href", "src", "action"})
_STANDARD_FIELDS = frozenset({"title", "url", "date", "snippet", "database", "jurisdiction"})


class Element(Protocol):
    async def query_selector(self, selector: str) -> Element | None: ...

    async def inner_text(self) -> str: ...

    async def get_attribute(self, name: str) -> str | None: ...


class Page(Protocol):
    url: str

    async def query_selector_all(self, selector: str) -> list[Any]: ...

    async def wait_for_selector(self, selector: str, **kwargs: Any) -> Any: ...


@dataclass(frozen=True)
class SelectorChain:
    """Alternative selectors for one field, best guess first.

    ``attribute`` reads an attribute of the matched element instead of its
    text, e.g. ``href`` for links.
    """

    selectors: tuple[str, ...]
    attribute: str | None = None

    def __post_init__(self) -> None:
        if not self.selectors:
            raise ValueError("a selector chain needs at least one selector")

    def __iter__(self) -> Iterator[str]:
        return iter(self.selectors)

    def __len__(self) -> int:
        return len(self.selectors)


def chain(*selectors: str, attribute: str | None = None) -> SelectorChain:
    return SelectorChain(tuple(selectors), attribute=attribute)


@dataclass(frozen=True)
class SelectorSet:
    """Container selectors plus one selector chain per logical field.

    Field selectors are evaluated relative to each matched container.
    """

    container: SelectorChain
    fields: Mapping[str, SelectorChain] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if "title" not in self.fields:
            raise ValueError("a selector set must define a 'title' field")


async def resolve_first(element: Element, selectors: SelectorChain) -> str | None:
    """Return the value of the first selector in ``selectors`` that matches.

    Empty matches count as misses so the next alternative gets a chance.
    """
    for selector in selectors:
        try:
            match = await element.query_selector(selector)
        except Exception as e:  # invalid selector for this engine, detached node
            logger.debug(f"Selector {selector!r} failed: {e}")
            continue
        if match is None:
            continue
        if selectors.attribute:
            value = await match.get_attribute(selectors.attribute)
        else:
            value = await match.inner_text()
        if value and value.strip():
            return value.strip()
    return None


async def _first_present(page: Page, selectors: SelectorChain) -> tuple[str, list[Any]] | None:
    for selector in selectors:
        try:
            elements = await page.query_selector_all(selector)
        except Exception as e:
            logger.debug(f"Container selector {selector!r} failed: {e}")
            continue
        if elements:
            return selector, elements
    return None


async def select_container(
    page: Page, selectors: SelectorChain, timeout_ms: int = DEFAULT_WAIT_MS
) -> tuple[str, list[Any]] | None:
    """Adopt the first container selector that matches within ``timeout_ms``.

    Alternatives already present on the page win in configuration order. If
    none is present yet, all alternatives are awaited concurrently; as soon as
    one appears the page is checked again in configuration order.
    """
    found = await _first_present(page, selectors)
    if found or timeout_ms <= 0:
        return found

    waits = [
        asyncio.create_task(page.wait_for_selector(s, timeout=timeout_ms, state="attached"))
        for s in selectors
    ]
    try:
        pending: set[asyncio.Task] = set(waits)
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_ms / 1000
        while pending:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            done, pending = await asyncio.wait(
                pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )
            if any(not t.cancelled() and t.exception() is None for t in done):
                return await _first_present(page, selectors)
    finally:
        for task in waits:
            task.cancel()
        await asyncio.gather(*waits, return_exceptions=True)

    return None


class ResilientExtractor:
    """Extract records from a rendered results page using a :class:`SelectorSet`."""

    def __init__(self, timeout_ms: int = DEFAULT_WAIT_MS) -> None:
        self.timeout_ms = timeout_ms

    async def extract_rows(
        self, page: Page, selector_set: SelectorSet, limit: int
    ) -> list[dict[str, str | None]]:
        """Return one dict of field values per result container, in page order.

        A field with no matching selector is ``None``; the row is kept. Rows
        without a usable title are dropped. An empty list means no container
        selector matched, which is a normal outcome for drifting markup.
        """
        found = await select_container(page, selector_set.container, self.timeout_ms)
        if not found:
            logger.info(f"No container selector matched on {page.url}")
            return []

        selector, containers = found
        logger.debug(f"Adopted container selector {selector!r} ({len(containers)} matches)")

        rows: list[dict[str, str | None]] = []
        for container in containers:
            if len(rows) >= limit:
                break
            row: dict[str, str | None] = {}
            for name, selectors in selector_set.fields.items():
                value = await resolve_first(container, selectors)
                if value and selectors.attribute in _URL_ATTRIBUTES:
                    value = urljoin(page.url, value)
                row[name] = value
            title = row.get("title")
            if not title or len(" ".join(title.split())) < MIN_TITLE_LENGTH:
                continue
            rows.append(row)
        return rows

    async def extract(
        self,
        page: Page,
        selector_set: SelectorSet,
        limit: int,
        *,
        source: str = "",
        category: Category | None = None,
        jurisdiction: Jurisdiction | None = None,
    ) -> list[Record]:
        """Extract rows and map the standard fields onto records.

        Without an explicit ``category`` it is inferred from the ``database``
        field. Non-standard fields are kept in ``Record.extras``.
        """
        rows = await self.extract_rows(page, selector_set, limit)
        return [
            self.row_to_record(
                row, fallback_url=page.url, source=source, category=category, jurisdiction=jurisdiction
            )
            for row in rows
        ]

    @staticmethod
    def row_to_record(
        row: dict[str, str | None],
        *,
        fallback_url: str = "",
        source: str = "",
        category: Category | None = None,
        jurisdiction: Jurisdiction | None = None,
    ) -> Record:
        extras = {k: v for k, v in row.items() if k not in _STANDARD_FIELDS and v}
        if row.get("database"):
            extras["database"] = row["database"]
        return Record(
            title=row.get("title") or "",
            url=row.get("url") or fallback_url,
            category=category or infer_category(row.get("database")),
            source=source,
            date=row.get("date"),
            snippet=truncate(row.get("snippet")),
            jurisdiction=jurisdiction,
            extras=extras,
        )


class StaticElement:
    """Playwright-like element over a BeautifulSoup tag."""

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    async def query_selector(self, selector: str) -> StaticElement | None:
        found = self._tag.select_one(selector)
        return StaticElement(found) if found is not None else None

    async def query_selector_all(self, selector: str) -> list[StaticElement]:
        return [StaticElement(t) for t in self._tag.select(selector)]

    async def inner_text(self) -> str:
        return self._tag.get_text(" ", strip=True)

    async def get_attribute(self, name: str) -> str | None:
        value = self._tag.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value


class StaticPage(StaticElement):
    """Playwright-like page over server-rendered HTML.

    The document never changes, so waiting for a selector either succeeds at
    once or fails at once.
    """

    def __init__(self, html: str, url: str = "") -> None:
        super().__init__(BeautifulSoup(html, "html.parser"))
        self.url = url

    async def wait_for_selector(self, selector: str, **kwargs: Any) -> StaticElement:
        found = await self.query_selector(selector)
        if found is None:
            raise TimeoutError(f"selector {selector!r} not present")
        return found
