"""US Code statute registry connector (Office of the Law Revision Counsel)."""
from __future__ import annotations

import logging
from typing import Any

from ..errors import BackendError
from ..models.legal import USCodeSection
from ..models.query import Category, Jurisdiction, Query
from ..models.record import Record
from ..normalize import us_code_to_record
from .base import BaseSource

logger = logging.getLogger(__name__)


class USCodeSource(BaseSource):
    """Sections of the United States Code."""

    name = "us_code"
    display_name = "US Code"
    base_url = "https://uscode.house.gov/api"
    categories = frozenset({Category.LEGISLATION})
    jurisdictions = frozenset({Jurisdiction.US})

    async def _search(self, query: Query, limit: int) -> list[Record]:
        params: dict[str, Any] = {"q": query.text, "limit": limit}
        if query.title:
            params["title"] = query.title
        data = await self._make_request(f"{self.base_url}/search", params=params)
        if "results" not in data:
            raise BackendError("malformed payload: no 'results' member", source=self.name)

        records: list[Record] = []
        for item in data["results"] or []:
            try:
                records.append(us_code_to_record(self.parse_section(item), self.name))
            except Exception as e:
                logger.debug(f"Skipping unparseable US Code section: {e}")
        return records

    async def get_record(self, record_id: str) -> Record | None:
        """Fetch a section by ``"<title>/<section>"``, e.g. ``"8/1101"``."""
        title, _, section = record_id.strip("/").partition("/")
        if not title.isdigit() or not section:
            logger.warning(f"Invalid US Code id {record_id!r}; expected title/section")
            return None
        try:
            data = await self._make_request(f"{self.base_url}/title/{title}/section/{section}")
            parsed = self.parse_section(data)
        except Exception as e:
            logger.warning(f"Failed to fetch US Code {record_id}: {e}")
            return None
        return us_code_to_record(parsed, self.name)

    def parse_section(self, item: dict[str, Any]) -> USCodeSection:
        title = int(item["title"])
        section = str(item["section"])
        return USCodeSection(
            title=title,
            section=section,
            heading=item.get("heading"),
            text=item.get("text"),
            url=item.get("url")
            or f"https://uscode.house.gov/view.xhtml?req=granuleid:USC-prelim-title{title}-section{section}",
            last_updated=item.get("last_updated"),
            source=item.get("source"),
        )
