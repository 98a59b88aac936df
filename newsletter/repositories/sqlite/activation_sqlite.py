from __future__ import annotations

from ...plugin import DataSources, Plugin
from ..activation import AwaitingActivationRepo


class AwaitingActivationRepoSqlite(AwaitingActivationRepo):
    """SQLite implementation of :class:`AwaitingActivationRepo`."""

    def __init__(self, sources: DataSources) -> None:
        self._sources = sources

    def insert(self, user_id: int, key: int, plugin: Plugin) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            "INSERT INTO newsletter_awaiting_activation (id_user, activation_key) VALUES (?, ?)",
            (user_id, key),
        )
        conn.commit()

    def delete(self, user_id: int, key: int, plugin: Plugin) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            "DELETE FROM newsletter_awaiting_activation WHERE id_user = ? AND activation_key = ?",
            (user_id, key),
        )
        conn.commit()

    def exists(self, user_id: int, key: int, plugin: Plugin) -> bool:
        cur = self._sources.connection(plugin).execute(
            """
            SELECT 1 FROM newsletter_awaiting_activation
            WHERE id_user = ? AND activation_key = ?
            LIMIT 1
            """,
            (user_id, key),
        )
        return cur.fetchone() is not None
