"""Legal data source adapters."""

from __future__ import annotations

from ..config import Settings
from .austlii import AustLIISource
from .base import BaseSource, LegalSource
from .base_html_source import BaseHTMLSourceAdapter
from .congress import CongressSource
from .extractor import ResilientExtractor, SelectorChain, SelectorSet, StaticPage, resolve_first
from .federal_legislation import FederalLegislationSource
from .federal_register import FederalRegisterSource
from .guard import RateIdentityGuard
from .high_court import HighCourtSource
from .nsw_legislation import NSWLegislationSource
from .regulations_gov import RegulationsGovSource
from .us_code import USCodeSource

__all__ = [
    "AustLIISource",
    "BaseHTMLSourceAdapter",
    "BaseSource",
    "CongressSource",
    "FederalLegislationSource",
    "FederalRegisterSource",
    "HighCourtSource",
    "LegalSource",
    "NSWLegislationSource",
    "RateIdentityGuard",
    "RegulationsGovSource",
    "ResilientExtractor",
    "SelectorChain",
    "SelectorSet",
    "StaticPage",
    "USCodeSource",
    "create_default_sources",
    "resolve_first",
]


def create_default_sources(settings: Settings | None = None) -> list[BaseSource]:
    """Build every adapter in configuration order.

    The scraping adapters share one guard so their randomized delays and
    browser identity come from a single place.
    """
    settings = settings or Settings.from_env()
    guard = RateIdentityGuard(settings)
    extractor = ResilientExtractor(settings.selector_timeout_ms)
    return [
        CongressSource(settings, api_key=settings.congress_api_key),
        FederalRegisterSource(settings),
        USCodeSource(settings),
        RegulationsGovSource(settings, api_key=settings.regulations_gov_api_key),
        AustLIISource(settings, guard=guard, extractor=extractor),
        FederalLegislationSource(settings, guard=guard, extractor=extractor),
        NSWLegislationSource(settings, guard=guard, extractor=extractor),
        HighCourtSource(settings, guard=guard, extractor=extractor),
    ]
