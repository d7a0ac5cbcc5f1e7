"""Tests for the scraped Australian sources over server-rendered HTML."""
from __future__ import annotations

import httpx
import pytest

from conftest import mock_client
from legal_research.models import Category, Jurisdiction, Query, SourceStatus
from legal_research.sources import (
    AustLIISource,
    FederalLegislationSource,
    HighCourtSource,
    NSWLegislationSource,
)

# Drifted layout: the primary ``ol.search-results`` container is gone.
AUSTLII_HTML = """
<html><body>
<ul class="results">
  <li><a href="/au/legis/cth/consol_act/nta1993147/">Native Title Act 1993</a>
      <span class="source">Commonwealth Consolidated Acts</span>
      <span class="jurisdiction">Commonwealth</span>
      <p class="summary">An Act about native title.</p></li>
  <li><a href="/au/cases/cth/HCA/1992/23.html">Mabo v Queensland (No 2)</a>
      <span class="source">High Court of Australia Cases</span></li>
  <li><a href="/au/journals/ALRS/2001/1.html">Native title and pastoral leases</a>
      <span class="source">Australian Law Reform Commission Reports</span></li>
  <li><a href="/cgi-bin/sinosrch.cgi?page=2">More</a></li>
</ul>
</body></html>
"""

FEDERAL_LEGISLATION_HTML = """
<table class="search-results"><tbody>
  <tr><td class="title"><a href="/C2004A04551/latest/text">Native Title Act 1993</a></td>
      <td class="number">110</td><td class="year">1993</td><td class="status">In force</td></tr>
  <tr><td class="title"><a href="/F2020L00001/latest/text">Native Title (Notices) Determination 2020</a></td>
      <td class="number"></td><td class="year">2020</td><td class="status">In force</td></tr>
</tbody></table>
"""

NSW_HTML = """
<div class="search-results">
  <div class="result"><span class="title"><a href="/view/html/inforce/current/act-1994-045">Native Title (New South Wales) Act 1994</a></span>
      <span class="number">No 45</span><span class="year">1994</span></div>
</div>
"""

HIGH_COURT_HTML = """
<section class="search-results">
  <div class="result">
    <h3><a href="/cases/case_s192-2019">Love v Commonwealth of Australia</a></h3>
    <span class="citation">[2020] HCA 3</span>
    <span class="date">11 February 2020</span>
    <div class="catchwords">Constitutional law, aliens power, Aboriginal Australians</div>
    <p>The plaintiffs were born outside Australia.</p>
  </div>
  <div class="result"><h3><a href="/cases/x">Re J</a></h3></div>
</section>
"""


def _html_client(html: str, seen: list[httpx.Request] | None = None) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(200, text=html, headers={"content-type": "text/html"})

    return mock_client(handler)


class TestAustLIISource:
    @pytest.mark.asyncio
    async def test_fallback_selectors(self, settings):
        seen: list[httpx.Request] = []
        source = AustLIISource(settings, client=_html_client(AUSTLII_HTML, seen))
        result = await source.search(Query(text="native title"), limit=10)

        assert result.status is SourceStatus.OK
        assert [r.title for r in result.records] == [
            "Native Title Act 1993",
            "Mabo v Queensland (No 2)",
            "Native title and pastoral leases",
        ]
        assert [r.category for r in result.records] == [
            Category.LEGISLATION,
            Category.CASE_LAW,
            Category.SECONDARY,
        ]
        assert result.records[0].jurisdiction is Jurisdiction.CTH
        assert result.records[0].url == "https://www.austlii.edu.au/au/legis/cth/consol_act/nta1993147/"
        assert seen[0].url.path == "/cgi-bin/sinosrch.cgi"
        assert seen[0].url.params["query"] == "native title"

    @pytest.mark.asyncio
    async def test_jurisdiction_and_type_params(self, settings):
        seen: list[httpx.Request] = []
        source = AustLIISource(settings, client=_html_client(AUSTLII_HTML, seen))
        await source.search(Query(text="native title", jurisdiction="VIC", category="case-law"))

        params = seen[0].url.params
        assert params["jurisdiction"] == "vic"
        assert params["type"] == "case_law"

    @pytest.mark.asyncio
    async def test_truncated_to_limit(self, settings):
        source = AustLIISource(settings, client=_html_client(AUSTLII_HTML))
        result = await source.search(Query(text="native title"), limit=2)
        assert result.count == 2

    @pytest.mark.asyncio
    async def test_unrecognised_layout_is_empty(self, settings):
        source = AustLIISource(settings, client=_html_client("<html><p>Service notice</p></html>"))
        result = await source.search(Query(text="native title"))
        assert result.status is SourceStatus.EMPTY

    @pytest.mark.asyncio
    async def test_us_jurisdiction_not_asked(self, settings):
        seen: list[httpx.Request] = []
        source = AustLIISource(settings, client=_html_client(AUSTLII_HTML, seen))
        result = await source.search(Query(text="native title", jurisdiction="US"))
        assert result.status is SourceStatus.EMPTY
        assert seen == []

    @pytest.mark.asyncio
    async def test_http_error_is_failed(self, settings):
        source = AustLIISource(settings, client=mock_client(lambda r: httpx.Response(503)))
        result = await source.search(Query(text="native title"))
        assert result.is_failed
        assert result.reason == "HTTP 503"


class TestFederalLegislationSource:
    @pytest.mark.asyncio
    async def test_rows(self, settings):
        source = FederalLegislationSource(settings, client=_html_client(FEDERAL_LEGISLATION_HTML))
        result = await source.search(Query(text="native title"))

        assert result.count == 2
        first = result.records[0]
        assert first.category is Category.LEGISLATION
        assert first.jurisdiction is Jurisdiction.CTH
        assert first.extras == {"act_number": "110", "year": 1993, "status": "In force"}
        assert first.url == "https://www.legislation.gov.au/C2004A04551/latest/text"
        assert "act_number" not in result.records[1].extras


class TestNSWLegislationSource:
    @pytest.mark.asyncio
    async def test_rows(self, settings):
        seen: list[httpx.Request] = []
        source = NSWLegislationSource(settings, client=_html_client(NSW_HTML, seen))
        result = await source.search(Query(text="native title"))

        assert [r.title for r in result.records] == ["Native Title (New South Wales) Act 1994"]
        assert result.records[0].jurisdiction is Jurisdiction.NSW
        assert result.records[0].date == "1994"
        assert seen[0].url.params["query"] == "native title"

    @pytest.mark.asyncio
    async def test_other_states_not_asked(self, settings):
        source = NSWLegislationSource(settings, client=_html_client(NSW_HTML))
        result = await source.search(Query(text="native title", jurisdiction="QLD"))
        assert result.status is SourceStatus.EMPTY


class TestHighCourtSource:
    @pytest.mark.asyncio
    async def test_rows(self, settings):
        source = HighCourtSource(settings, client=_html_client(HIGH_COURT_HTML))
        result = await source.search(Query(text="aliens power"))

        assert result.count == 1
        record = result.records[0]
        assert record.title == "Love v Commonwealth of Australia"
        assert record.category is Category.CASE_LAW
        assert record.date == "11 February 2020"
        assert record.snippet == "The plaintiffs were born outside Australia."
        assert record.extras["citation"] == "[2020] HCA 3"
        assert record.extras["court"] == "High Court of Australia"
        assert record.extras["catchwords"] == [
            "Constitutional law",
            "aliens power",
            "Aboriginal Australians",
        ]

    @pytest.mark.asyncio
    async def test_category_filter(self, settings):
        source = HighCourtSource(settings, client=_html_client(HIGH_COURT_HTML))
        result = await source.search(Query(text="aliens power", category="legislation"))
        assert result.status is SourceStatus.EMPTY
