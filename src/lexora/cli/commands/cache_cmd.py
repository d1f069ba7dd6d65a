# ABOUTME: The `lexora cache` command group for cache maintenance.
# ABOUTME: Shows statistics and clears expired or all cached metadata entries.

from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from lexora.cli.options import cache_db_option
from lexora.core.factory import build_cache

console = Console()

_MS_PER_DAY = 24 * 60 * 60 * 1000


@click.group("cache")
def cache() -> None:
    """Inspect and maintain the metadata cache."""


@cache.command("stats")
@cache_db_option
def stats(cache_path: Path | None) -> None:
    """Show how many entries are cached and how much space they use."""
    result = build_cache(cache_path).stats()

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value")
    table.add_row("Entries", str(result.count))
    table.add_row("Size", f"{result.total_size_bytes / 1024:.1f} KB")
    if result.oldest_entry_ms is not None:
        oldest = datetime.fromtimestamp(result.oldest_entry_ms / 1000)
        table.add_row("Oldest entry", oldest.isoformat(sep=" ", timespec="seconds"))
    else:
        table.add_row("Oldest entry", "[dim]none[/dim]")

    console.print(table)


@cache.command("clear-expired")
@click.option(
    "--ttl-days",
    type=click.FloatRange(min=0),
    default=7.0,
    show_default=True,
    help="Entries older than this are removed (0 removes only corrupt entries).",
)
@cache_db_option
def clear_expired(ttl_days: float, cache_path: Path | None) -> None:
    """Remove expired and corrupt cache entries."""
    removed = build_cache(cache_path).clear_expired(int(ttl_days * _MS_PER_DAY))
    console.print(f"Removed {removed} expired entr{'y' if removed == 1 else 'ies'}.")


@cache.command("clear")
@click.confirmation_option(prompt="Remove every cached entry?")
@cache_db_option
def clear(cache_path: Path | None) -> None:
    """Remove every cached entry."""
    removed = build_cache(cache_path).clear_all()
    console.print(f"Removed {removed} entr{'y' if removed == 1 else 'ies'}.")
