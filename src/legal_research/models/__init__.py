"""Pydantic data models."""

from .legal import (
    AustLIIResult,
    BillAction,
    CaseLawSearchResult,
    CongressBill,
    FederalRegisterDocument,
    LegislationSearchResult,
    RegulationComment,
    Sponsor,
    USCodeSection,
)
from .query import AUSTRALIAN_JURISDICTIONS, MAX_LIMIT, Category, Jurisdiction, Query
from .record import MIN_TITLE_LENGTH, Record, SourceResult, SourceStatus

__all__ = [
    "Query",
    "Category",
    "Jurisdiction",
    "AUSTRALIAN_JURISDICTIONS",
    "MAX_LIMIT",
    "Record",
    "SourceResult",
    "SourceStatus",
    "MIN_TITLE_LENGTH",
    "CongressBill",
    "BillAction",
    "Sponsor",
    "FederalRegisterDocument",
    "USCodeSection",
    "RegulationComment",
    "AustLIIResult",
    "LegislationSearchResult",
    "CaseLawSearchResult",
]
