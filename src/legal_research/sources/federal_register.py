"""Federal Register regulation registry connector.

Rules, proposed rules, notices and presidential documents published by US
federal agencies. No API key required.

API documentation: https://www.federalregister.gov/developers/documentation/api/v1
"""
from __future__ import annotations

import logging
from typing import Any

from ..errors import BackendError
from ..models.legal import FederalRegisterDocument
from ..models.query import Category, Jurisdiction, Query
from ..models.record import Record
from ..normalize import federal_register_to_record
from .base import BaseSource

logger = logging.getLogger(__name__)

_FIELDS = [
    "document_number",
    "title",
    "abstract",
    "publication_date",
    "effective_on",
    "agencies",
    "type",
    "pdf_url",
    "html_url",
    "json_url",
]


class FederalRegisterSource(BaseSource):
    """Federal Register documents."""

    name = "federal_register"
    display_name = "Federal Register"
    base_url = "https://www.federalregister.gov/api/v1"
    categories = frozenset({Category.REGULATION})
    jurisdictions = frozenset({Jurisdiction.US})
    supports_recent = True

    async def _search(self, query: Query, limit: int) -> list[Record]:
        params: dict[str, Any] = {
            "conditions[term]": query.text,
            "per_page": limit,
            "order": "relevance",
            "fields[]": _FIELDS,
        }
        data = await self._make_request(f"{self.base_url}/documents.json", params=params)
        return self._parse_results(data)

    async def _recent(self, query: Query, limit: int) -> list[Record]:
        params: dict[str, Any] = {"per_page": limit, "order": "newest", "fields[]": _FIELDS}
        if query.text:
            params["conditions[term]"] = query.text
        data = await self._make_request(f"{self.base_url}/documents.json", params=params)
        return self._parse_results(data)

    async def get_record(self, record_id: str) -> Record | None:
        """Fetch one document by its document number (e.g. ``"2024-01234"``)."""
        url = f"{self.base_url}/documents/{record_id.strip()}.json"
        try:
            data = await self._make_request(url)
            doc = self.parse_document(data)
        except Exception as e:
            logger.warning(f"Failed to fetch Federal Register document {record_id}: {e}")
            return None
        return federal_register_to_record(doc, self.name)

    def _parse_results(self, data: dict[str, Any]) -> list[Record]:
        # An empty result set omits "results" but still reports a count.
        if "results" not in data and "count" not in data:
            raise BackendError("malformed payload: no 'results' member", source=self.name)
        records: list[Record] = []
        for item in data.get("results") or []:
            try:
                records.append(federal_register_to_record(self.parse_document(item), self.name))
            except Exception as e:
                logger.debug(f"Skipping unparseable Federal Register document: {e}")
        return records

    def parse_document(self, item: dict[str, Any]) -> FederalRegisterDocument:
        agencies = item.get("agency_names")
        if agencies is None:
            agencies = [a.get("name") for a in item.get("agencies") or [] if a.get("name")]
        number = item["document_number"]
        return FederalRegisterDocument(
            document_number=number,
            title=item.get("title") or "",
            abstract=item.get("abstract"),
            publication_date=item.get("publication_date"),
            effective_date=item.get("effective_on") or item.get("effective_date"),
            agency_names=agencies,
            document_type=item.get("type") or item.get("document_type"),
            pdf_url=item.get("pdf_url"),
            html_url=item.get("html_url") or f"https://www.federalregister.gov/d/{number}",
            json_url=item.get("json_url"),
        )
