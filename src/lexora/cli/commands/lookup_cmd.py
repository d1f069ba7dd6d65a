# ABOUTME: The `lexora lookup` command for resolving an ISBN (or title) into book metadata.
# ABOUTME: Runs the cache-then-providers resolver and prints the result as a table.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from lexora.cli.options import api_key_option, cache_db_option
from lexora.core.factory import build_default_resolver
from lexora.core.resolver import ResolutionOutcome
from lexora.metadata.types import BookMetadata

console = Console()


def _render(metadata: BookMetadata) -> Table:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=12)
    table.add_column("Value")

    table.add_row("Title", metadata.title)
    table.add_row("Authors", metadata.authors)
    table.add_row("Publisher", metadata.publisher)
    table.add_row("Published", metadata.published_date or "?")
    if metadata.isbn:
        table.add_row("ISBN", metadata.isbn)
    if metadata.page_count is not None:
        table.add_row("Pages", str(metadata.page_count))
    if metadata.categories:
        table.add_row("Categories", metadata.categories)
    if metadata.thumbnail:
        table.add_row("Cover", metadata.thumbnail)
    if metadata.description:
        table.add_row("Description", metadata.description)
    table.add_row("Source", metadata.source.value)
    return table


@click.command("lookup")
@click.argument("query")
@click.option("--title", "by_title", is_flag=True, help="Treat QUERY as a title, not an ISBN.")
@cache_db_option
@api_key_option
def lookup(query: str, by_title: bool, cache_path: Path | None, api_key: str | None) -> None:
    """Look up book metadata for an ISBN, using the cache first."""
    resolver = build_default_resolver(cache_path=cache_path, api_key=api_key)

    metadata = resolver.resolve_title(query) if by_title else resolver.resolve(query)

    if metadata is None:
        if resolver.last_outcome is ResolutionOutcome.INVALID:
            console.print(f"[red]Invalid ISBN: {query}[/red]")
        else:
            console.print("[yellow]No metadata found.[/yellow]")
        raise SystemExit(1)

    console.print(_render(metadata))
