"""Native record types, one per backend response shape.

Adapters parse backend payloads into these models first; the normalizer then
maps them onto :class:`~legal_research.models.record.Record`.
"""

from pydantic import BaseModel, Field


class BillAction(BaseModel):
    action_date: str | None = None
    text: str = ""


class Sponsor(BaseModel):
    bioguide_id: str | None = None
    first_name: str = ""
    last_name: str = ""
    party: str | None = None
    state: str | None = None

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        if self.party and self.state:
            return f"{name} ({self.party}-{self.state})"
        return name


class CongressBill(BaseModel):
    """A bill or resolution from Congress.gov."""

    congress: int
    type: str
    number: str
    title: str
    short_title: str | None = None
    summary: str | None = None
    url: str
    introduced_date: str | None = None
    latest_action: BillAction | None = None
    subjects: list[str] = Field(default_factory=list)
    sponsors: list[Sponsor] = Field(default_factory=list)

    @property
    def designation(self) -> str:
        """e.g. ``118-HR-2640``."""
        return f"{self.congress}-{self.type.upper()}-{self.number}"


class FederalRegisterDocument(BaseModel):
    """A rule, proposed rule, notice or presidential document."""

    document_number: str
    title: str
    abstract: str | None = None
    publication_date: str | None = None
    effective_date: str | None = None
    agency_names: list[str] = Field(default_factory=list)
    document_type: str | None = None
    pdf_url: str | None = None
    html_url: str
    json_url: str | None = None


class USCodeSection(BaseModel):
    title: int
    section: str
    heading: str | None = None
    text: str | None = None
    url: str
    last_updated: str | None = None
    source: str | None = None

    @property
    def citation(self) -> str:
        return f"{self.title} U.S.C. § {self.section}"


class RegulationComment(BaseModel):
    """A public comment posted to Regulations.gov."""

    id: str
    title: str | None = None
    comment: str | None = None
    posted_date: str | None = None
    agency_id: str | None = None
    document_id: str | None = None
    submitter_name: str | None = None
    organization: str | None = None


class AustLIIResult(BaseModel):
    title: str
    url: str
    snippet: str | None = None
    database: str | None = None
    jurisdiction: str | None = None
    date: str | None = None


class LegislationSearchResult(BaseModel):
    title: str
    url: str
    jurisdiction: str
    act_number: str | None = None
    year: int | None = None
    status: str | None = None
    description: str | None = None


class CaseLawSearchResult(BaseModel):
    case_name: str
    url: str
    citation: str | None = None
    court: str
    jurisdiction: str
    decision_date: str | None = None
    catchwords: list[str] = Field(default_factory=list)
    summary: str | None = None
