"""AustLII connector (Australasian Legal Information Institute).

Free access to Australian legislation, case law and secondary material across
every jurisdiction. Results are scraped from the sino search page.
"""
from __future__ import annotations

from ..models.legal import AustLIIResult
from ..models.query import AUSTRALIAN_JURISDICTIONS, Category, Jurisdiction, Query
from ..models.record import Record
from ..normalize import austlii_to_record
from .base_html_source import BaseHTMLSourceAdapter
from .extractor import SelectorSet, chain

_CATEGORY_PARAM = {
    Category.LEGISLATION: "legislation",
    Category.CASE_LAW: "case_law",
    Category.SECONDARY: "secondary_material",
}


class AustLIISource(BaseHTMLSourceAdapter):
    """Search AustLII for legislation, cases and secondary material."""

    name = "austlii"
    display_name = "AustLII"
    base_url = "https://www.austlii.edu.au"
    search_path = "/cgi-bin/sinosrch.cgi"
    categories = frozenset(_CATEGORY_PARAM)
    jurisdictions = AUSTRALIAN_JURISDICTIONS

    selectors = SelectorSet(
        container=chain("ol.search-results > li", "ul.results li", "div.search-result", ".result"),
        fields={
            "title": chain("a.title", "h3 a", "a"),
            "url": chain("a.title", "h3 a", "a", attribute="href"),
            "snippet": chain(".snippet", ".summary", "p"),
            "database": chain(".database", ".source", ".meta .db"),
            "jurisdiction": chain(".jurisdiction", ".meta .jur"),
            "date": chain(".date", "time"),
        },
    )

    def search_params(self, query: Query) -> dict[str, str]:
        params = {"query": query.text, "metaname": "all", "path": "all"}
        # Commonwealth material is searched by default; narrower jurisdictions filter.
        if query.jurisdiction and query.jurisdiction is not Jurisdiction.CTH:
            params["jurisdiction"] = query.jurisdiction.value.lower()
        if query.category in _CATEGORY_PARAM:
            params["type"] = _CATEGORY_PARAM[query.category]
        return params

    def _row_to_record(self, row: dict[str, str | None], page_url: str) -> Record:
        result = AustLIIResult(
            title=row.get("title") or "",
            url=row.get("url") or page_url,
            snippet=row.get("snippet"),
            database=row.get("database"),
            jurisdiction=row.get("jurisdiction"),
            date=row.get("date"),
        )
        return austlii_to_record(result, self.name)
