"""SQLite storage adapter.

Implements the core BindingStorePort using a simple SQLite database.
"""

from __future__ import annotations

import sqlite3

from core.errors import PersistenceError
from core.models import Binding


class SQLiteBindingStore:
    """Thin SQLite wrapper that satisfies the BindingStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create the bindings table if it does not exist."""

        try:
            with self._connect() as conn:
                # event_bindings holds one row per announcement/role pair.
                # Fields mirror the persisted document shape:
                # - event_guild_id: server holding the announcement
                # - event_channel_id: channel holding the announcement
                # - event_message_id: announcement message
                # - event_role_id: role granted to participants
                # Uniqueness is left to the callers, as with the document store.
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS event_bindings (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        event_guild_id TEXT NOT NULL,
                        event_channel_id TEXT NOT NULL,
                        event_message_id TEXT NOT NULL,
                        event_role_id TEXT NOT NULL
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot initialise {self._db_path}: {exc}") from exc

    def insert(self, binding: Binding) -> None:
        """Append a binding row."""

        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO event_bindings (
                        event_guild_id,
                        event_channel_id,
                        event_message_id,
                        event_role_id
                    ) VALUES (?, ?, ?, ?)
                    """,
                    (binding.guild_id, binding.channel_id, binding.message_id, binding.role_id),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot insert binding: {exc}") from exc

    def delete_by_role_id(self, role_id: str) -> None:
        """Remove the binding of a role; absent roles are ignored."""

        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM event_bindings WHERE event_role_id = ?", (role_id,))
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot delete binding of role {role_id}: {exc}") from exc

    def list_all(self) -> list[Binding]:
        """Return every binding, in no particular order."""

        try:
            with self._connect() as conn:
                rows = conn.execute(
                    """
                    SELECT event_guild_id, event_channel_id, event_message_id, event_role_id
                    FROM event_bindings
                    """
                ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot list bindings: {exc}") from exc
        return [
            Binding(
                guild_id=row["event_guild_id"],
                channel_id=row["event_channel_id"],
                message_id=row["event_message_id"],
                role_id=row["event_role_id"],
            )
            for row in rows
        ]
