"""NSW Legislation connector (legislation.nsw.gov.au)."""
from __future__ import annotations

from ..models.legal import LegislationSearchResult
from ..models.query import Category, Jurisdiction
from ..models.record import Record
from ..normalize import legislation_to_record, parse_year
from .base_html_source import BaseHTMLSourceAdapter
from .extractor import SelectorSet, chain


class NSWLegislationSource(BaseHTMLSourceAdapter):
    """Search in-force New South Wales Acts and regulations."""

    name = "nsw_legislation"
    display_name = "NSW Legislation"
    base_url = "https://legislation.nsw.gov.au"
    search_path = "/search/all"
    query_param = "query"
    categories = frozenset({Category.LEGISLATION})
    jurisdictions = frozenset({Jurisdiction.NSW})
    default_category = Category.LEGISLATION
    default_jurisdiction = Jurisdiction.NSW

    selectors = SelectorSet(
        container=chain(".search-results .result", "table.results tr.result", "ul.search-list > li"),
        fields={
            "title": chain(".title a", "td a", "a"),
            "url": chain(".title a", "td a", "a", attribute="href"),
            "act_number": chain(".act-number", ".number"),
            "year": chain(".year", ".date", "td.year"),
            "status": chain(".status", ".in-force"),
        },
    )

    def _row_to_record(self, row: dict[str, str | None], page_url: str) -> Record:
        result = LegislationSearchResult(
            title=row.get("title") or "",
            url=row.get("url") or page_url,
            jurisdiction=Jurisdiction.NSW.value,
            act_number=row.get("act_number"),
            year=parse_year(row.get("year")),
            status=row.get("status"),
        )
        return legislation_to_record(result, self.name)
