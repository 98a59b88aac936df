from __future__ import annotations

from typing import Optional

from ...plugin import DataSources, Plugin
from ..subscribers import Subscriber, SubscribersRepo


class SubscribersRepoSqlite(SubscribersRepo):
    """SQLite implementation of :class:`SubscribersRepo`."""

    def __init__(self, sources: DataSources) -> None:
        self._sources = sources

    def insert(self, subscriber: Subscriber, plugin: Plugin) -> int:
        conn = self._sources.connection(plugin)
        if subscriber.id is None:
            cur = conn.execute(
                "INSERT INTO newsletter_subscriber_details (email) VALUES (?)",
                (subscriber.email,),
            )
        else:
            cur = conn.execute(
                "INSERT INTO newsletter_subscriber_details (id_subscriber, email) VALUES (?, ?)",
                (subscriber.id, subscriber.email),
            )
        conn.commit()
        rowid = cur.lastrowid
        if rowid is None:
            raise RuntimeError(
                "SQLite insert failed: no lastrowid (table: newsletter_subscriber_details)"
            )
        return int(rowid)

    def load(self, subscriber_id: int, plugin: Plugin) -> Optional[Subscriber]:
        cur = self._sources.connection(plugin).execute(
            "SELECT id_subscriber, email FROM newsletter_subscriber_details WHERE id_subscriber = ?",
            (subscriber_id,),
        )
        row = cur.fetchone()
        if row:
            return Subscriber(*row)
        return None

    def find_by_email(self, email: str, plugin: Plugin) -> Optional[Subscriber]:
        cur = self._sources.connection(plugin).execute(
            """
            SELECT id_subscriber, email FROM newsletter_subscriber_details
            WHERE LOWER(email) = LOWER(?)
            ORDER BY id_subscriber
            LIMIT 1
            """,
            (email,),
        )
        row = cur.fetchone()
        if row:
            return Subscriber(*row)
        return None

    def delete(self, subscriber_id: int, plugin: Plugin) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            "DELETE FROM newsletter_subscriber_details WHERE id_subscriber = ?",
            (subscriber_id,),
        )
        conn.commit()
