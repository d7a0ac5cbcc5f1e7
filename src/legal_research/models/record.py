"""Normalized record and per-source result models."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from legal_research.errors import ErrorType
from legal_research.models.query import Category, Jurisdiction

# Titles this short are navigation crumbs or partial matches, not documents.
MIN_TITLE_LENGTH = 6


class Record(BaseModel):
    """One search hit in the shape shared by every source."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    url: str
    category: Category = Field(default=Category.SECONDARY)
    source: str = Field(default="", description="Name of the adapter that produced this record")
    date: str | None = Field(default=None)
    snippet: str | None = Field(default=None)
    jurisdiction: Jurisdiction | None = Field(default=None)
    extras: dict[str, Any] = Field(
        default_factory=dict, description="Source-specific fields (citation, act number, ...)"
    )

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = " ".join(value.split())
        if not value:
            raise ValueError("title must not be blank")
        return value

    @property
    def has_usable_title(self) -> bool:
        return len(self.title) >= MIN_TITLE_LENGTH


class SourceStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceResult:
    """Outcome of one adapter call: ``Ok(records)``, ``Empty`` or ``Failed(reason)``.

    Build instances through :meth:`ok`, :meth:`empty` and :meth:`failed` so the
    invariants hold: an ``Ok`` result always has records, and none of them has a
    too-short title.
    """

    source: str
    status: SourceStatus
    records: tuple[Record, ...] = ()
    reason: str | None = None
    error_type: ErrorType | None = None
    elapsed_ms: float = 0.0

    @classmethod
    def ok(cls, source: str, records: Iterable[Record], elapsed_ms: float = 0.0) -> SourceResult:
        kept = tuple(r for r in records if r.has_usable_title)
        if not kept:
            return cls.empty(source, elapsed_ms=elapsed_ms)
        return cls(source=source, status=SourceStatus.OK, records=kept, elapsed_ms=elapsed_ms)

    @classmethod
    def empty(cls, source: str, elapsed_ms: float = 0.0) -> SourceResult:
        return cls(source=source, status=SourceStatus.EMPTY, elapsed_ms=elapsed_ms)

    @classmethod
    def failed(
        cls,
        source: str,
        reason: str,
        error_type: ErrorType = ErrorType.UNKNOWN,
        elapsed_ms: float = 0.0,
    ) -> SourceResult:
        return cls(
            source=source,
            status=SourceStatus.FAILED,
            reason=reason,
            error_type=error_type,
            elapsed_ms=elapsed_ms,
        )

    @property
    def is_ok(self) -> bool:
        return self.status is SourceStatus.OK

    @property
    def is_failed(self) -> bool:
        return self.status is SourceStatus.FAILED

    @property
    def count(self) -> int:
        return len(self.records)

    def truncated(self, limit: int) -> SourceResult:
        """Return a copy holding at most ``limit`` records, page order kept."""
        if self.count <= limit:
            return self
        return SourceResult.ok(self.source, self.records[:limit], elapsed_ms=self.elapsed_ms)

