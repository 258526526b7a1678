"""SQLite slot storage adapter.

Implements the core SlotStorePort using a simple SQLite database.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from core.errors import PersistenceError


class SQLiteSlotStore:
    """Thin SQLite wrapper that satisfies the SlotStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside one transaction and always close it."""

        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create the slots table if it does not exist.

        Fields:
        - name: slot name (PRIMARY KEY)
        - value: slot payload, stored verbatim
        - updated_at: timestamp of the last write
        """

        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS slots (
                        name TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMP NOT NULL
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not initialise {self._db_path}: {exc}") from exc

    def get(self, name: str) -> Optional[str]:
        """Return the slot value, if any."""

        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM slots WHERE name = ?",
                    (name,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not read slot {name}: {exc}") from exc
        return str(row["value"]) if row else None

    def set(self, name: str, value: str) -> None:
        """Upsert the slot value.

        The connection context manager commits on success and rolls back on
        error, so readers see either the old or the new value, never a mix.
        """

        now = datetime.now(timezone.utc)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO slots (name, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(name) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (name, value, now.isoformat()),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not write slot {name}: {exc}") from exc

    def delete(self, name: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM slots WHERE name = ?", (name,))
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not delete slot {name}: {exc}") from exc
