"""SQLite-backed store for the remote agent endpoint URL.

Persists the URL the user saved in settings so it survives restarts.
Falls back to the configured default when nothing has been saved.
"""

import sqlite3
import time
from pathlib import Path

from chat.config import CHAT_DB_PATH, WEBHOOK_URL
from shared.models import EndpointConfig

ENDPOINT_KEY = "webhook_url"


class ConfigStore:
    """Persistent key/value settings store holding the endpoint URL."""

    def __init__(self, db_path: Path = CHAT_DB_PATH, default_url: str = WEBHOOK_URL):
        self.db_path = str(db_path)
        self.default_url = default_url
        self._init_db()

    def _init_db(self) -> None:
        """Create settings table if not exists."""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key        TEXT PRIMARY KEY,
                    value      TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
            """)
            conn.commit()

    def get(self) -> str:
        """Return the saved endpoint URL, or the default if none is saved."""
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM settings WHERE key = ?", (ENDPOINT_KEY,)
            ).fetchone()
        return row[0] if row else self.default_url

    def endpoint(self) -> EndpointConfig:
        """Return the current endpoint as an EndpointConfig snapshot."""
        return EndpointConfig(url=self.get())

    def set(self, url: str) -> None:
        """Save the endpoint URL, replacing any previous value."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO settings (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (ENDPOINT_KEY, url, time.time()),
            )
            conn.commit()

    def clear(self) -> None:
        """Forget the saved URL so get() returns the default again."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM settings WHERE key = ?", (ENDPOINT_KEY,))
            conn.commit()

    def is_default(self) -> bool:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT 1 FROM settings WHERE key = ?", (ENDPOINT_KEY,)
            ).fetchone()
        return row is None
