# ABOUTME: The `lexora isbn` command for checking raw scanner or keyboard input.
# ABOUTME: Prints the normalized ISBN and whether it is well-formed.

import click
from rich.console import Console

from lexora.metadata.isbn import is_valid_isbn, normalize_isbn

console = Console()


@click.command("isbn")
@click.argument("raw")
def isbn(raw: str) -> None:
    """Normalize RAW and report whether it is a valid ISBN-10 or ISBN-13."""
    normalized = normalize_isbn(raw)
    if is_valid_isbn(normalized):
        console.print(f"[green]{normalized}[/green] (ISBN-{len(normalized)})")
        return

    shown = normalized or "(empty)"
    console.print(f"[red]{shown}[/red] is not a valid ISBN.")
    raise SystemExit(1)
