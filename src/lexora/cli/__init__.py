# ABOUTME: CLI package for Lexora, built on Click.
# ABOUTME: Defines the root command group, log setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from lexora.cli.commands import cache_cmd, isbn_cmd, lookup_cmd


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG with --verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
        force=True,
    )


@click.group()
@click.version_option(package_name="lexora")
@click.option("-v", "--verbose", is_flag=True, help="Show lookup diagnostics.")
def cli(verbose: bool) -> None:
    """Lexora - ISBN metadata lookup for the library catalog."""
    _configure_logging(verbose)


cli.add_command(isbn_cmd.isbn)
cli.add_command(lookup_cmd.lookup)
cli.add_command(cache_cmd.cache)
