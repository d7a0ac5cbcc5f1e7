"""Legal Research Aggregator - one query across US and Australian legal databases.

Congress.gov, the Federal Register, the US Code and Regulations.gov are reached
through their JSON APIs; AustLII, the Federal Register of Legislation, NSW
Legislation and the High Court are scraped from rendered search pages.
"""

__version__ = "0.1.0"

# Lazy imports keep `import legal_research` free of httpx/playwright
def __getattr__(name: str):
    if name in ("SourceAggregator", "AggregatorConfig", "MergedResult", "create_default_aggregator"):
        from legal_research import aggregator
        return getattr(aggregator, name)
    if name in ("Query", "Record", "SourceResult", "Category", "Jurisdiction"):
        from legal_research import models
        return getattr(models, name)
    if name == "Settings":
        from legal_research.config import Settings
        return Settings
    if name == "sources":
        from legal_research import sources
        return sources
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
