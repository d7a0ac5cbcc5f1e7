"""Query model and the closed filter enumerations."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_LIMIT = 50


class Category(str, Enum):
    """Kind of legal material a record represents."""

    LEGISLATION = "legislation"
    CASE_LAW = "case-law"
    REGULATION = "regulation"
    BILL = "bill"
    COMMENT = "comment"
    SECONDARY = "secondary"


class Jurisdiction(str, Enum):
    """Jurisdictions served by the configured sources."""

    US = "US"  # United States federal
    CTH = "CTH"  # Commonwealth of Australia
    NSW = "NSW"
    VIC = "VIC"
    QLD = "QLD"
    WA = "WA"
    SA = "SA"
    TAS = "TAS"
    NT = "NT"
    ACT = "ACT"

    @property
    def label(self) -> str:
        return JURISDICTION_NAMES[self]


JURISDICTION_NAMES: dict[Jurisdiction, str] = {
    Jurisdiction.US: "United States",
    Jurisdiction.CTH: "Commonwealth",
    Jurisdiction.NSW: "New South Wales",
    Jurisdiction.VIC: "Victoria",
    Jurisdiction.QLD: "Queensland",
    Jurisdiction.WA: "Western Australia",
    Jurisdiction.SA: "South Australia",
    Jurisdiction.TAS: "Tasmania",
    Jurisdiction.NT: "Northern Territory",
    Jurisdiction.ACT: "Australian Capital Territory",
}

AUSTRALIAN_JURISDICTIONS = frozenset(j for j in Jurisdiction if j is not Jurisdiction.US)


class Query(BaseModel):
    """A single logical research query. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Free-text search terms")
    category: Category | None = Field(default=None, description="Restrict to one kind of material")
    jurisdiction: Jurisdiction | None = Field(default=None)
    limit: int | None = Field(
        default=None, ge=1, le=MAX_LIMIT, description="Per-source result limit"
    )
    congress: int | None = Field(
        default=None, ge=100, le=120, description="Congress number for bill searches"
    )
    title: int | None = Field(default=None, ge=1, le=54, description="US Code title number")

    @field_validator("text")
    @classmethod
    def _strip_text(cls, value: str) -> str:
        return value.strip()
