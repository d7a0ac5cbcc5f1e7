"""CLI interface for the legal research aggregator."""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .aggregator import MergedResult, create_default_aggregator
from .config import Settings
from .logging import configure_logging
from .models.query import Category, Jurisdiction, Query
from .sources import create_default_sources

app = typer.Typer(
    name="legal-research",
    help="Search US and Australian legal databases in one pass",
    add_completion=False,
)
console = Console()


def _run(coro):
    """Run a coroutine, turning any failure into a one-line error and exit code 1."""
    try:
        return asyncio.run(coro)
    except Exception as e:
        console.print(f"[red]error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e


async def _search(query: Query, limit: int, sources: list[str] | None) -> MergedResult:
    async with create_default_aggregator(Settings.from_env()) as aggregator:
        return await aggregator.search_all(query, limit=limit, sources=sources)


async def _recent(limit: int) -> MergedResult:
    async with create_default_aggregator(Settings.from_env()) as aggregator:
        return await aggregator.recent_all(limit=limit)


@app.command()
def search(
    query: str = typer.Argument(..., help="Search terms"),
    category: Category = typer.Option(None, "--category", "-c", help="Restrict to one kind of material"),
    jurisdiction: Jurisdiction = typer.Option(
        None, "--jurisdiction", "-j", case_sensitive=False, help="Restrict to one jurisdiction"
    ),
    limit: int = typer.Option(20, "--limit", "-l", min=1, help="Maximum results overall"),
    source: list[str] = typer.Option(None, "--source", "-s", help="Only ask these sources"),
    output: Path = typer.Option(None, "--output", "-o", help="Write results as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show snippets and per-source status"),
):
    """Search every configured legal database."""
    if verbose:
        configure_logging("INFO")

    q = Query(text=query, category=category, jurisdiction=jurisdiction)
    merged = _run(_search(q, limit, source or None))
    _display_results(merged, verbose)

    if output:
        _save_results(merged, output)
        console.print(f"[green]Results saved to {output}[/green]")


@app.command()
def recent(
    limit: int = typer.Option(20, "--limit", "-l", min=1, help="Maximum results overall"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show snippets and per-source status"),
):
    """Show the newest bills, rules and public comments."""
    if verbose:
        configure_logging("INFO")
    merged = _run(_recent(limit))
    _display_results(merged, verbose)


@app.command("sources")
def list_sources():
    """List the configured sources and whether each is ready to use."""
    settings = Settings.from_env()
    table = Table(title="Legal Sources")
    table.add_column("Name")
    table.add_column("Database")
    table.add_column("Categories")
    table.add_column("Jurisdictions")
    table.add_column("Status")

    for src in create_default_sources(settings):
        if src.is_configured():
            status = "[green]ready[/green]"
        else:
            status = "[yellow]missing credentials[/yellow]"
        table.add_row(
            src.name,
            src.display_name,
            ", ".join(sorted(c.value for c in src.categories)),
            ", ".join(sorted(j.value for j in src.jurisdictions)),
            status,
        )

    console.print(table)


def _display_results(merged: MergedResult, verbose: bool):
    """Display merged results in a formatted way."""
    if merged.no_results:
        console.print("[yellow]no results[/yellow]")
    else:
        table = Table(title=f"Results for '{merged.query.text}'" if merged.query.text else "Recent")
        table.add_column("Source")
        table.add_column("Category")
        table.add_column("Title")
        table.add_column("Date")
        if verbose:
            table.add_column("Snippet")

        for record in merged.records:
            title = f"[link={record.url}]{escape(record.title)}[/link]"
            row = [record.source, record.category.value, title, record.date or ""]
            if verbose:
                row.append(escape(record.snippet or ""))
            table.add_row(*row)

        console.print(table)

    # A blank answer is reported once; per-source reasons only on request.
    if verbose or (merged.sources_failed and not merged.no_results):
        for group in merged.groups:
            if group.is_failed:
                console.print(f"[red]{group.source}: failed ({group.reason})[/red]")
            elif verbose:
                console.print(f"[dim]{group.source}: {group.count}[/dim]")

    console.print(f"[dim]{merged.total_count} results from {len(merged.sources_searched)} sources[/dim]")


def _save_results(merged: MergedResult, output: Path):
    """Save merged results to a JSON file."""
    output_data = {
        "query": merged.query.model_dump(mode="json"),
        "records": [r.model_dump(mode="json") for r in merged.records],
        "counts": merged.counts,
        "failed": {g.source: g.reason for g in merged.groups if g.is_failed},
    }

    with open(output, "w") as f:
        json.dump(output_data, f, indent=2, default=str)


if __name__ == "__main__":
    app()
