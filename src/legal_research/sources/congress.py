"""Congress.gov bill registry connector.

Searches bills and resolutions through the Congress.gov v3 API. An API key
(``CONGRESS_API_KEY``) is recommended; without one requests go out
unauthenticated and are subject to the public rate limit.

API documentation: https://api.congress.gov/
"""
from __future__ import annotations

import logging
from typing import Any

from ..models.legal import BillAction, CongressBill, Sponsor
from ..models.query import Category, Jurisdiction, Query
from ..models.record import Record
from ..errors import BackendError
from ..normalize import bill_to_record
from .base import BaseSource

logger = logging.getLogger(__name__)


class CongressSource(BaseSource):
    """Bills and resolutions from Congress.gov."""

    name = "congress"
    display_name = "Congress.gov"
    base_url = "https://api.congress.gov/v3"
    categories = frozenset({Category.BILL})
    jurisdictions = frozenset({Jurisdiction.US})
    supports_recent = True

    def _auth_params(self) -> dict[str, str]:
        return {"api_key": self.api_key} if self.api_key else {}

    def _bill_url(self, congress: int | None) -> str:
        if congress:
            return f"{self.base_url}/bill/{congress}"
        return f"{self.base_url}/bill"

    async def _search(self, query: Query, limit: int) -> list[Record]:
        params: dict[str, Any] = {"q": query.text, "limit": limit, "format": "json"}
        data = await self._make_request(self._bill_url(query.congress), params=params)
        return self._parse_results(data)

    async def _recent(self, query: Query, limit: int) -> list[Record]:
        params: dict[str, Any] = {
            "limit": limit,
            "format": "json",
            "sort": "updateDate desc",
        }
        data = await self._make_request(self._bill_url(query.congress), params=params)
        return self._parse_results(data)

    async def get_record(self, record_id: str) -> Record | None:
        """Fetch bill details.

        Args:
            record_id: ``"<congress>/<type>/<number>"``, e.g. ``"118/hr/2640"``

        Returns:
            The bill as a record, or None if it cannot be retrieved
        """
        parts = record_id.strip("/").split("/")
        if len(parts) != 3:
            logger.warning(f"Invalid bill id {record_id!r}; expected congress/type/number")
            return None
        congress, bill_type, number = parts
        url = f"{self.base_url}/bill/{congress}/{bill_type.lower()}/{number}"
        try:
            data = await self._make_request(url, params={"format": "json"})
            bill = self.parse_bill(data["bill"])
        except Exception as e:
            logger.warning(f"Failed to fetch Congress bill {record_id}: {e}")
            return None
        return bill_to_record(bill, self.name)

    def _parse_results(self, data: dict[str, Any]) -> list[Record]:
        if "bills" not in data:
            raise BackendError("malformed payload: no 'bills' member", source=self.name)
        records: list[Record] = []
        for item in data["bills"] or []:
            try:
                records.append(bill_to_record(self.parse_bill(item), self.name))
            except Exception as e:
                logger.debug(f"Skipping unparseable bill: {e}")
        return records

    def parse_bill(self, item: dict[str, Any]) -> CongressBill:
        """Map a Congress.gov bill object onto :class:`CongressBill`."""
        latest = item.get("latestAction") or None
        summary = item.get("summary")
        if isinstance(summary, dict):
            summary = summary.get("text")
        subjects = item.get("subjects") or []
        if isinstance(subjects, dict):
            # detail responses nest subjects under legislativeSubjects
            subjects = subjects.get("legislativeSubjects") or []

        congress = int(item["congress"])
        bill_type = str(item["type"])
        number = str(item["number"])
        return CongressBill(
            congress=congress,
            type=bill_type,
            number=number,
            title=item.get("title") or "",
            short_title=item.get("shortTitle"),
            summary=summary,
            url=item.get("url") or f"{self.base_url}/bill/{congress}/{bill_type.lower()}/{number}",
            introduced_date=item.get("introducedDate"),
            latest_action=(
                BillAction(action_date=latest.get("actionDate"), text=latest.get("text") or "")
                if latest
                else None
            ),
            subjects=[s["name"] if isinstance(s, dict) else str(s) for s in subjects],
            sponsors=[
                Sponsor(
                    bioguide_id=s.get("bioguideId"),
                    first_name=s.get("firstName") or "",
                    last_name=s.get("lastName") or "",
                    party=s.get("party"),
                    state=s.get("state"),
                )
                for s in item.get("sponsors") or []
            ],
        )
