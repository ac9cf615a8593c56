import sqlite3

SQL = r"""
/* ======================== KEY-VALUE STORE ======================== */

/* One row per namespaced collection (gsm-sales, gsm-technicians, ...).
   value holds the whole collection as JSON text. */
CREATE TABLE IF NOT EXISTS kv_store (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_kv_store_updated ON kv_store(updated_at);
"""


def apply_schema(conn: sqlite3.Connection) -> None:
    """Apply the (idempotent) schema on an open connection."""
    conn.executescript(SQL)
    conn.commit()
