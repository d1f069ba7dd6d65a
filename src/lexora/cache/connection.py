# ABOUTME: Opens the on-disk SQLite database backing the Lexora metadata cache.
# ABOUTME: Ensures the cache_entries table exists and enables WAL journaling.

import sqlite3
from pathlib import Path

DEFAULT_CACHE_PATH = Path.home() / ".lexora" / "cache.db"

# One namespaced key/value table; values are JSON-encoded cache entries.
_CACHE_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS cache_entries (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
)
"""


def open_cache(path: Path | None = None) -> sqlite3.Connection:
    """Open the cache database, creating the file and its table on first use.

    WAL journaling lets a `lexora cache stats` in one process read while a
    lookup in another is writing.

    Args:
        path: Database file. Defaults to ~/.lexora/cache.db; missing parent
            directories are created.

    Returns:
        A connection whose rows come back as sqlite3.Row.
    """
    db_path = path or DEFAULT_CACHE_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_CACHE_TABLE_DDL)
    conn.commit()
    return conn
