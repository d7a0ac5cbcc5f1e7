"""Federal Register of Legislation connector (legislation.gov.au).

Official source for Commonwealth Acts and legislative instruments.
"""
from __future__ import annotations

from ..models.legal import LegislationSearchResult
from ..models.query import Category, Jurisdiction
from ..models.record import Record
from ..normalize import legislation_to_record, parse_year
from .base_html_source import BaseHTMLSourceAdapter
from .extractor import SelectorSet, chain


class FederalLegislationSource(BaseHTMLSourceAdapter):
    """Search Commonwealth legislation."""

    name = "federal_legislation"
    display_name = "Federal Register of Legislation"
    base_url = "https://www.legislation.gov.au"
    search_path = "/search"
    categories = frozenset({Category.LEGISLATION})
    jurisdictions = frozenset({Jurisdiction.CTH})
    default_category = Category.LEGISLATION
    default_jurisdiction = Jurisdiction.CTH

    selectors = SelectorSet(
        container=chain(
            "table.search-results tbody tr",
            "div.search-result-item",
            ".result-item",
            "li.result",
        ),
        fields={
            "title": chain("td.title a", "h3 a", "a.title", "a"),
            "url": chain("td.title a", "h3 a", "a.title", "a", attribute="href"),
            "act_number": chain(".act-number", "td.number", ".series-id"),
            "year": chain(".year", "td.year", ".date"),
            "status": chain(".status", "td.status"),
            "description": chain(".description", ".summary", "p"),
        },
    )

    def _row_to_record(self, row: dict[str, str | None], page_url: str) -> Record:
        result = LegislationSearchResult(
            title=row.get("title") or "",
            url=row.get("url") or page_url,
            jurisdiction=Jurisdiction.CTH.value,
            act_number=row.get("act_number"),
            year=parse_year(row.get("year")),
            status=row.get("status"),
            description=row.get("description"),
        )
        return legislation_to_record(result, self.name)
