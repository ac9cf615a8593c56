from __future__ import annotations

"""
Key-value persistence for the shop's collections.

Schema reference (see `database/schema.py`):

CREATE TABLE kv_store (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,          -- JSON
    updated_at  TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);

Each namespaced key (gsm-sales, gsm-technicians, ...) holds one whole
collection as JSON. Writes are last-writer-wins per key; there is no
transaction spanning two keys.
"""

import json
import sqlite3
from typing import Any

from ...utils.loggers import get_logger

_log = get_logger(__name__)


class KeyValueStore:
    def __init__(self, conn: sqlite3.Connection):
        # ensure rows behave like dicts/tuples
        conn.row_factory = sqlite3.Row
        self.conn = conn

    def has(self, key: str) -> bool:
        row = self.conn.execute("SELECT 1 FROM kv_store WHERE key=?", (key,)).fetchone()
        return row is not None

    def keys(self) -> list[str]:
        rows = self.conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [r["key"] for r in rows]

    def load(self, key: str, default: Any = None) -> Any:
        """
        Decoded value for `key`, or `default` when the key is absent or its
        stored text is not valid JSON.
        """
        row = self.conn.execute("SELECT value FROM kv_store WHERE key=?", (key,)).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except (TypeError, ValueError) as e:
            _log.warning("Stored value for %r is not valid JSON (%s); using default.", key, e)
            return default

    def save(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        self.conn.execute(
            """
            INSERT INTO kv_store(key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
            """,
            (key, payload),
        )
        self.conn.commit()

    def delete(self, key: str) -> None:
        self.conn.execute("DELETE FROM kv_store WHERE key=?", (key,))
        self.conn.commit()
