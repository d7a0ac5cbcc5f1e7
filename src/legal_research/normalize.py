"""Result normalizer.

Maps each backend's native record type onto the presentation fields every
record shares (title, url, category, jurisdiction, date, snippet). Anything
source specific goes into ``Record.extras`` so it survives without widening the
common shape.
"""
from __future__ import annotations

import re
from typing import Any

from legal_research.models.legal import (
    AustLIIResult,
    CaseLawSearchResult,
    CongressBill,
    FederalRegisterDocument,
    LegislationSearchResult,
    RegulationComment,
    USCodeSection,
)
from legal_research.models.query import Category, Jurisdiction
from legal_research.models.record import Record

SNIPPET_LENGTH = 300

_JURISDICTION_ALIASES: dict[str, Jurisdiction] = {
    "commonwealth": Jurisdiction.CTH,
    "federal": Jurisdiction.CTH,
    "cth": Jurisdiction.CTH,
    "new south wales": Jurisdiction.NSW,
    "victoria": Jurisdiction.VIC,
    "queensland": Jurisdiction.QLD,
    "western australia": Jurisdiction.WA,
    "south australia": Jurisdiction.SA,
    "tasmania": Jurisdiction.TAS,
    "northern territory": Jurisdiction.NT,
    "australian capital territory": Jurisdiction.ACT,
}


def infer_category(label: str | None) -> Category:
    """Guess a category from a weak textual signal such as a database label.

    ``"Consolidated Acts"`` is legislation, ``"Federal Court Cases"`` is case
    law, anything else is secondary material.
    """
    text = (label or "").lower()
    if "act" in text:
        return Category.LEGISLATION
    if "case" in text:
        return Category.CASE_LAW
    return Category.SECONDARY


def parse_jurisdiction(value: str | None) -> Jurisdiction | None:
    """Resolve a code (``"NSW"``) or a name (``"New South Wales"``)."""
    if not value:
        return None
    text = value.strip()
    try:
        return Jurisdiction(text.upper())
    except ValueError:
        pass
    return _JURISDICTION_ALIASES.get(text.lower())


def parse_year(text: str | None) -> int | None:
    if not text:
        return None
    match = re.search(r"\b(1[6-9]\d{2}|20\d{2})\b", text)
    return int(match.group(1)) if match else None


def truncate(text: str | None, length: int = SNIPPET_LENGTH) -> str | None:
    if not text:
        return None
    text = " ".join(text.split())
    if len(text) <= length:
        return text
    return text[: length - 3].rstrip() + "..."


def _compact(extras: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in extras.items() if v not in (None, "", [], {})}


def bill_to_record(bill: CongressBill, source: str) -> Record:
    latest = bill.latest_action
    return Record(
        title=bill.title,
        url=bill.url,
        category=Category.BILL,
        source=source,
        date=bill.introduced_date or (latest.action_date if latest else None),
        snippet=truncate(bill.summary or (latest.text if latest else None)),
        jurisdiction=Jurisdiction.US,
        extras=_compact(
            {
                "designation": bill.designation,
                "short_title": bill.short_title,
                "sponsor": bill.sponsors[0].display_name if bill.sponsors else None,
                "latest_action": latest.text if latest else None,
                "subjects": bill.subjects[:3],
            }
        ),
    )


def federal_register_to_record(doc: FederalRegisterDocument, source: str) -> Record:
    return Record(
        title=doc.title,
        url=doc.html_url,
        category=Category.REGULATION,
        source=source,
        date=doc.publication_date,
        snippet=truncate(doc.abstract),
        jurisdiction=Jurisdiction.US,
        extras=_compact(
            {
                "document_number": doc.document_number,
                "document_type": doc.document_type,
                "agency": ", ".join(doc.agency_names),
                "effective_date": doc.effective_date,
                "pdf_url": doc.pdf_url,
            }
        ),
    )


def us_code_to_record(section: USCodeSection, source: str) -> Record:
    title = f"Title {section.title}, Section {section.section}"
    if section.heading:
        title = f"{title}: {section.heading}"
    return Record(
        title=title,
        url=section.url,
        category=Category.LEGISLATION,
        source=source,
        date=section.last_updated,
        snippet=truncate(section.text),
        jurisdiction=Jurisdiction.US,
        extras=_compact({"citation": section.citation}),
    )


def comment_to_record(comment: RegulationComment, source: str) -> Record:
    title = comment.title or f"Comment {comment.id}"
    return Record(
        title=title,
        url=f"https://www.regulations.gov/comment/{comment.id}",
        category=Category.COMMENT,
        source=source,
        date=comment.posted_date,
        snippet=truncate(comment.comment, 100),
        jurisdiction=Jurisdiction.US,
        extras=_compact(
            {
                "comment_id": comment.id,
                "agency_id": comment.agency_id,
                "document_id": comment.document_id,
                "submitter": comment.submitter_name,
                "organization": comment.organization,
            }
        ),
    )


def austlii_to_record(result: AustLIIResult, source: str) -> Record:
    return Record(
        title=result.title,
        url=result.url,
        category=infer_category(result.database),
        source=source,
        date=result.date,
        snippet=truncate(result.snippet),
        jurisdiction=parse_jurisdiction(result.jurisdiction),
        extras=_compact({"database": result.database}),
    )


def legislation_to_record(result: LegislationSearchResult, source: str) -> Record:
    return Record(
        title=result.title,
        url=result.url,
        category=Category.LEGISLATION,
        source=source,
        date=str(result.year) if result.year else None,
        snippet=truncate(result.description),
        jurisdiction=parse_jurisdiction(result.jurisdiction),
        extras=_compact(
            {
                "act_number": result.act_number,
                "year": result.year,
                "status": result.status,
            }
        ),
    )


def case_to_record(result: CaseLawSearchResult, source: str) -> Record:
    return Record(
        title=result.case_name,
        url=result.url,
        category=Category.CASE_LAW,
        source=source,
        date=result.decision_date,
        snippet=truncate(result.summary),
        jurisdiction=parse_jurisdiction(result.jurisdiction),
        extras=_compact(
            {
                "citation": result.citation,
                "court": result.court,
                "catchwords": result.catchwords,
            }
        ),
    )
