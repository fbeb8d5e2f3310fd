"""
SQLite key-value store used to persist session data between runs.

Every call opens its own connection. Failures are logged and swallowed:
the in-memory session stays the source of truth.
"""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from loguru import logger

from core.config import DB_PATH


def get_connection(db_path: Path = DB_PATH) -> sqlite3.Connection:
    """Get a database connection, creating the store on first use."""
    create_store(db_path)
    return sqlite3.connect(db_path)


def create_store(db_path: Path = DB_PATH) -> None:
    """Create the database file and kv_store table if they don't exist."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        conn.commit()
    finally:
        conn.close()


def load_value(key: str, db_path: Path = DB_PATH) -> str | None:
    """Return the stored value for key, or None if missing or unreadable."""
    try:
        conn = get_connection(db_path)
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
        finally:
            conn.close()
    except (sqlite3.Error, OSError) as e:
        logger.error(f"Failed to load '{key}' from {db_path}: {e}")
        return None

    return row[0] if row else None


def save_value(key: str, value: str, db_path: Path = DB_PATH) -> bool:
    """Insert or replace value for key. Returns False on failure."""
    try:
        conn = get_connection(db_path)
        try:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()
        finally:
            conn.close()
    except (sqlite3.Error, OSError) as e:
        logger.error(f"Failed to save '{key}' to {db_path}: {e}")
        return False

    logger.debug(f"Saved '{key}' ({len(value)} chars) to {db_path}")
    return True
