"""Regulations.gov public-comment registry connector.

Requires an API key (``REGULATIONS_GOV_API_KEY``). Without one the source
reports ``missing credentials`` on every call instead of hitting the API.

API documentation: https://open.gsa.gov/api/regulationsgov/
"""
from __future__ import annotations

import logging
from typing import Any

from ..errors import BackendError
from ..models.legal import RegulationComment
from ..models.query import Category, Jurisdiction, Query
from ..models.record import Record
from ..normalize import comment_to_record
from .base import BaseSource, require_api_key

logger = logging.getLogger(__name__)

# The API rejects page sizes below 5; extra rows are trimmed afterwards.
MIN_PAGE_SIZE = 5


class RegulationsGovSource(BaseSource):
    """Public comments on proposed rules."""

    name = "regulations_gov"
    display_name = "Regulations.gov"
    base_url = "https://api.regulations.gov/v4"
    categories = frozenset({Category.COMMENT})
    jurisdictions = frozenset({Jurisdiction.US})
    supports_recent = True

    def requires_auth(self) -> bool:
        return True

    def _auth_headers(self) -> dict[str, str]:
        return {"X-Api-Key": require_api_key(self)}

    async def _search(self, query: Query, limit: int) -> list[Record]:
        params: dict[str, Any] = {
            "filter[searchTerm]": query.text,
            "page[size]": max(limit, MIN_PAGE_SIZE),
            "sort": "-postedDate",
        }
        data = await self._make_request(f"{self.base_url}/comments", params=params)
        return self._parse_results(data)

    async def _recent(self, query: Query, limit: int) -> list[Record]:
        params: dict[str, Any] = {"page[size]": max(limit, MIN_PAGE_SIZE), "sort": "-postedDate"}
        if query.text:
            params["filter[searchTerm]"] = query.text
        data = await self._make_request(f"{self.base_url}/comments", params=params)
        return self._parse_results(data)

    def _parse_results(self, data: dict[str, Any]) -> list[Record]:
        if "data" not in data:
            raise BackendError("malformed payload: no 'data' member", source=self.name)
        records: list[Record] = []
        for item in data["data"] or []:
            try:
                records.append(comment_to_record(self.parse_comment(item), self.name))
            except Exception as e:
                logger.debug(f"Skipping unparseable comment: {e}")
        return records

    def parse_comment(self, item: dict[str, Any]) -> RegulationComment:
        attrs = item.get("attributes") or {}
        return RegulationComment(
            id=str(item["id"]),
            title=attrs.get("title"),
            comment=attrs.get("comment"),
            posted_date=attrs.get("postedDate"),
            agency_id=attrs.get("agencyId"),
            document_id=attrs.get("commentOnDocumentId") or attrs.get("documentId"),
            submitter_name=attrs.get("submitterName"),
            organization=attrs.get("organization"),
        )
