# ABOUTME: Shared Click options for Lexora CLI commands.
# ABOUTME: Provides reusable decorators for the cache database path and provider API key.

from pathlib import Path

import click

from lexora.cache.connection import DEFAULT_CACHE_PATH

cache_db_option = click.option(
    "--cache-db",
    "cache_path",
    type=click.Path(path_type=Path),
    default=None,
    envvar="LEXORA_CACHE_DB",
    help=f"Path to the metadata cache database (default: {DEFAULT_CACHE_PATH})",
)

api_key_option = click.option(
    "--api-key",
    "api_key",
    default=None,
    envvar="GOOGLE_BOOKS_API_KEY",
    help="Google Books API key (optional).",
)
