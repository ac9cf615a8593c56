# database/__init__.py
from __future__ import annotations

from pathlib import Path
import sqlite3
from typing import Optional

from ..config import DB_PATH
from ..constants import SCHEMA_VERSION, TABLE_SCHEMA_VERSION
from . import schema as schema_module
from .seeders.default_data import seed as seed_default_data

MEMORY_DB = ":memory:"


def _ensure_version_table(conn: sqlite3.Connection) -> None:
    conn.execute(f"""
        CREATE TABLE IF NOT EXISTS {TABLE_SCHEMA_VERSION}(
            id INTEGER PRIMARY KEY CHECK (id=1),
            version TEXT NOT NULL
        );
    """)
    if schema_version(conn) is None:
        conn.execute(
            f"INSERT INTO {TABLE_SCHEMA_VERSION}(id, version) VALUES (1, ?);",
            (SCHEMA_VERSION,),
        )


def schema_version(conn: sqlite3.Connection) -> Optional[str]:
    """Version recorded when the store was first created."""
    row = conn.execute(f"SELECT version FROM {TABLE_SCHEMA_VERSION} WHERE id=1;").fetchone()
    return row[0] if row else None


def get_connection(db_path: Path | str | None = None, *, seed: bool = True) -> sqlite3.Connection:
    """
    Returns a sqlite3.Connection with:
      - WAL mode (file databases only)
      - row_factory = sqlite3.Row (so rows behave like dicts and tuples)
    Ensures schema, schema version & seed data are applied idempotently.

    `db_path` defaults to config.DB_PATH; pass ":memory:" for a throwaway store.
    """
    target = DB_PATH if db_path is None else db_path
    in_memory = str(target) == MEMORY_DB

    if not in_memory:
        Path(target).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(target))
    conn.row_factory = sqlite3.Row
    if not in_memory:
        conn.execute("PRAGMA journal_mode = WAL;")

    schema_module.apply_schema(conn)
    _ensure_version_table(conn)

    # Seeders only write keys that are absent, so this is safe on every start.
    if seed:
        seed_default_data(conn)

    conn.commit()
    return conn


__all__ = [
    "MEMORY_DB",
    "get_connection",
    "schema_version",
]
