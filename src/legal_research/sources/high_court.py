"""High Court of Australia judgments connector."""
from __future__ import annotations

from ..models.legal import CaseLawSearchResult
from ..models.query import Category, Jurisdiction
from ..models.record import Record
from ..normalize import case_to_record
from .base_html_source import BaseHTMLSourceAdapter
from .extractor import SelectorSet, chain

COURT_NAME = "High Court of Australia"


class HighCourtSource(BaseHTMLSourceAdapter):
    """Search High Court judgments.

    A judgment without a citation or catchwords is still returned; only the
    case name is required.
    """

    name = "high_court"
    display_name = COURT_NAME
    base_url = "https://www.hcourt.gov.au"
    search_path = "/search"
    categories = frozenset({Category.CASE_LAW})
    jurisdictions = frozenset({Jurisdiction.CTH})
    default_category = Category.CASE_LAW
    default_jurisdiction = Jurisdiction.CTH

    selectors = SelectorSet(
        container=chain(".search-results .result", "article.judgment", "li.search-result"),
        fields={
            "title": chain("h3 a", ".case-name a", "a"),
            "url": chain("h3 a", ".case-name a", "a", attribute="href"),
            "citation": chain(".citation", ".mnc"),
            "date": chain(".date", "time"),
            "catchwords": chain(".catchwords"),
            "summary": chain(".summary", "p"),
        },
    )

    def _row_to_record(self, row: dict[str, str | None], page_url: str) -> Record:
        catchwords = row.get("catchwords") or ""
        result = CaseLawSearchResult(
            case_name=row.get("title") or "",
            url=row.get("url") or page_url,
            citation=row.get("citation"),
            court=COURT_NAME,
            jurisdiction=Jurisdiction.CTH.value,
            decision_date=row.get("date"),
            catchwords=[c.strip() for c in catchwords.split(",") if c.strip()],
            summary=row.get("summary"),
        )
        return case_to_record(result, self.name)
