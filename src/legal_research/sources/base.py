"""Base interface for legal data sources."""
from __future__ import annotations

import asyncio
import logging
import random
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential_jitter

from legal_research.config import Settings
from legal_research.errors import (
    MISSING_CREDENTIALS,
    ConfigurationError,
    ErrorType,
    classify_exception,
)
from legal_research.models.query import MAX_LIMIT, Category, Jurisdiction, Query
from legal_research.models.record import Record, SourceResult

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from types import TracebackType


@runtime_checkable
class LegalSource(Protocol):
    """Protocol every source adapter implements.

    ``search`` never raises: failures come back as ``SourceResult.failed``.
    """

    name: str

    async def search(self, query: Query, limit: int | None = None) -> SourceResult:
        """Search the backend.

        Args:
            query: Search parameters
            limit: Requested number of records, clamped to the source's bounds

        Returns:
            Ok, Empty or Failed result tagged with this source's name
        """
        ...

    def requires_auth(self) -> bool:
        """Check if this source needs an API key to work at all."""
        ...


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500 or exc.response.status_code == 429
    return isinstance(exc, (httpx.TimeoutException, httpx.TransportError))


class BaseSource(ABC):
    """Abstract base class for legal data sources.

    Subclasses implement ``_search`` (and ``_recent`` where the backend can
    list newest material) returning plain records; the public methods add
    limit clamping, filter checks, credential checks and the conversion of
    every failure into a ``Failed`` result.
    """

    name: ClassVar[str] = "base"
    display_name: ClassVar[str] = ""
    base_url: ClassVar[str] = ""
    categories: ClassVar[frozenset[Category]] = frozenset(Category)
    jurisdictions: ClassVar[frozenset[Jurisdiction]] = frozenset(Jurisdiction)
    default_limit: ClassVar[int] = 20
    max_limit: ClassVar[int] = MAX_LIMIT
    supports_recent: ClassVar[bool] = False

    def __init__(
        self,
        settings: Settings | None = None,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            settings: Shared runtime configuration (copied by reference; frozen)
            api_key: Optional API key for authenticated sources
            client: Optional preconfigured HTTP client, mostly for tests
        """
        self.settings = settings or Settings()
        self.api_key = api_key
        self._client = client

    def requires_auth(self) -> bool:
        return False

    def is_configured(self) -> bool:
        """Check if this source is properly configured."""
        if self.requires_auth():
            return bool(self.api_key)
        return True

    def clamp_limit(self, limit: int | None) -> int:
        """Bring a requested limit into ``[1, max_limit]`` without complaining."""
        if limit is None:
            return self.default_limit
        return max(1, min(int(limit), self.max_limit))

    def accepts(self, query: Query) -> bool:
        """Whether the query's filters leave anything for this source to find."""
        if query.category is not None and query.category not in self.categories:
            return False
        if query.jurisdiction is not None and query.jurisdiction not in self.jurisdictions:
            return False
        return True

    async def search(self, query: Query, limit: int | None = None) -> SourceResult:
        n = self.clamp_limit(limit if limit is not None else query.limit)
        return await self._guarded(self._search, query, n)

    async def recent(self, query: Query | None = None, limit: int | None = None) -> SourceResult:
        """List the newest material, most recent first."""
        query = query or Query(text="")
        n = self.clamp_limit(limit if limit is not None else query.limit)
        if not self.supports_recent:
            return SourceResult.failed(
                self.name, "recent listing not supported", ErrorType.CONFIGURATION
            )
        return await self._guarded(self._recent, query, n, require_text=False)

    async def _guarded(
        self,
        op: Callable[[Query, int], Awaitable[list[Record]]],
        query: Query,
        n: int,
        require_text: bool = True,
    ) -> SourceResult:
        start = time.monotonic()
        if not self.accepts(query):
            return SourceResult.empty(self.name)
        # A missing key fails even for a blank query.
        if not self.is_configured():
            return SourceResult.failed(self.name, MISSING_CREDENTIALS, ErrorType.CONFIGURATION)
        if require_text and not query.text:
            return SourceResult.empty(self.name)
        try:
            records = await op(query, n)
        except Exception as e:
            error_type, reason = classify_exception(e)
            logger.warning(f"{self.name} search failed ({error_type.value}): {reason}")
            return SourceResult.failed(
                self.name, reason, error_type, elapsed_ms=(time.monotonic() - start) * 1000
            )
        return SourceResult.ok(self.name, records[:n], elapsed_ms=(time.monotonic() - start) * 1000)

    @abstractmethod
    async def _search(self, query: Query, limit: int) -> list[Record]:
        """Query the backend; may raise, ``search`` converts failures."""

    async def _recent(self, query: Query, limit: int) -> list[Record]:
        """Override hook for sources with ``supports_recent``; lists nothing by default."""
        return []

    async def get_record(self, record_id: str) -> Record | None:
        """Retrieve a specific record by ID, or None when unavailable."""
        return None

    def _auth_params(self) -> dict[str, str]:
        """Query parameters carrying the API key, if this backend wants one."""
        return {}

    def _auth_headers(self) -> dict[str, str]:
        return {}

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.http_timeout,
                follow_redirects=True,
                headers={"User-Agent": self.settings.api_user_agent},
            )
        return self._client

    async def _request(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """GET with retry on transient failures (timeouts, connection errors, 5xx, 429)."""
        client = self._get_client()
        merged_params = {**(params or {}), **self._auth_params()}
        merged_headers = {**(headers or {}), **self._auth_headers()}
        cfg = self.settings

        @retry(
            reraise=True,
            stop=stop_after_attempt(cfg.max_attempts),
            wait=wait_exponential_jitter(initial=cfg.retry_initial_backoff, max=cfg.retry_max_backoff),
            retry=retry_if_exception(_is_transient),
        )
        async def _do() -> httpx.Response:
            # Small jitter to avoid herding
            await asyncio.sleep(random.uniform(0.0, 0.05))
            resp = await client.get(url, params=merged_params, headers=merged_headers)
            resp.raise_for_status()
            return resp

        return await _do()

    async def _make_request(
        self, url: str, params: dict[str, Any] | None = None, headers: dict[str, str] | None = None
    ) -> dict[str, Any]:
        """GET a JSON document from the backend."""
        resp = await self._request(url, params, {"Accept": "application/json", **(headers or {})})
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object from {url}")
        return data

    async def close(self) -> None:
        """Close HTTP client connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> BaseSource:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        """Async context manager exit - ensures connection cleanup."""
        await self.close()
        return False


def require_api_key(source: BaseSource) -> str:
    """Return the source's API key or raise :class:`ConfigurationError`."""
    if not source.api_key:
        raise ConfigurationError(MISSING_CREDENTIALS, source=source.name)
    return source.api_key
