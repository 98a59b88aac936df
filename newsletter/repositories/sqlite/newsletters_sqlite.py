from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Optional

from ...plugin import DataSources, Plugin
from ..newsletters import Document, NewsLetter, NewsLetterRepo, ReferenceItem
from .timestamps import from_db, parse, to_db

DOCUMENT_LIST_PORTLET = "DOCUMENT_LIST_PORTLET"
SEQUENCE_NAME = "newsletter_description"

_NEWSLETTER_COLUMNS = """
    id_newsletter, name, description, date_last_send, html, id_newsletter_template,
    workgroup, unsubscribe, sender_mail, sender_name, test_recipients
"""


def _row_to_newsletter(row: sqlite3.Row | tuple) -> NewsLetter:
    return NewsLetter(
        id=row[0],
        name=row[1],
        description=row[2],
        date_last_sending=from_db(row[3]),
        html=row[4],
        template_id=row[5],
        workgroup=row[6],
        unsubscribe=bool(row[7]),
        sender_mail=row[8],
        sender_name=row[9],
        test_recipients=row[10],
    )


def _newsletter_params(newsletter: NewsLetter) -> tuple:
    return (
        newsletter.name,
        newsletter.description,
        to_db(newsletter.date_last_sending) if newsletter.date_last_sending else None,
        newsletter.html,
        newsletter.template_id,
        newsletter.workgroup,
        int(newsletter.unsubscribe),
        newsletter.sender_mail,
        newsletter.sender_name,
        newsletter.test_recipients,
    )


def _like_pattern(search: str) -> str:
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class NewsLetterRepoSqlite(NewsLetterRepo):
    """SQLite implementation of :class:`NewsLetterRepo`.

    Example:
        >>> from datetime import datetime, timezone
        >>> sources = DataSources({"portal": ":memory:"})
        >>> plugin = Plugin(name="newsletter")
        >>> repo = NewsLetterRepoSqlite(sources)
        >>> nid = repo.new_primary_key(plugin)
        >>> repo.insert(NewsLetter(id=nid, name="Weekly"), plugin)
        >>> repo.insert_subscriber(nid, 7, datetime.now(timezone.utc), plugin)
        >>> repo.is_registered(nid, 7, plugin)
        True
    """

    def __init__(self, sources: DataSources, plugin: Plugin | None = None) -> None:
        self._sources = sources
        # Pool of the newsletter tables for calls that receive no plugin
        self._plugin = plugin or Plugin(name="newsletter", db_pool_name=sources.default_pool)

    # -- newsletter lifecycle ------------------------------------------------

    def insert(self, newsletter: NewsLetter, plugin: Plugin) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            f"INSERT INTO newsletter_description ({_NEWSLETTER_COLUMNS})"
            " VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (newsletter.id, *_newsletter_params(newsletter)),
        )
        conn.commit()

    def delete(self, newsletter_id: int, plugin: Plugin) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            "DELETE FROM newsletter_description WHERE id_newsletter = ?",
            (newsletter_id,),
        )
        conn.commit()

    def load(self, newsletter_id: int, plugin: Plugin) -> Optional[NewsLetter]:
        cur = self._sources.connection(plugin).execute(
            f"SELECT {_NEWSLETTER_COLUMNS} FROM newsletter_description WHERE id_newsletter = ?",
            (newsletter_id,),
        )
        row = cur.fetchone()
        if row:
            return _row_to_newsletter(row)
        return None

    def store(self, newsletter: NewsLetter, plugin: Plugin) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            """
            UPDATE newsletter_description
            SET name = ?, description = ?, date_last_send = ?, html = ?,
                id_newsletter_template = ?, workgroup = ?, unsubscribe = ?,
                sender_mail = ?, sender_name = ?, test_recipients = ?
            WHERE id_newsletter = ?
            """,
            (*_newsletter_params(newsletter), newsletter.id),
        )
        conn.commit()

    def check_primary_key(self, key: int, plugin: Plugin) -> bool:
        cur = self._sources.connection(plugin).execute(
            "SELECT 1 FROM newsletter_description WHERE id_newsletter = ?",
            (key,),
        )
        return cur.fetchone() is not None

    def new_primary_key(self, plugin: Plugin) -> int:
        conn = self._sources.connection(plugin)
        conn.execute(
            "INSERT OR IGNORE INTO newsletter_sequence (name, value) VALUES (?, 0)",
            (SEQUENCE_NAME,),
        )
        # Never below the stored ids, so rows inserted with explicit ids are skipped too
        conn.execute(
            """
            UPDATE newsletter_sequence
            SET value = MAX(
                value,
                (SELECT COALESCE(MAX(id_newsletter), 0) FROM newsletter_description)
            ) + 1
            WHERE name = ?
            """,
            (SEQUENCE_NAME,),
        )
        row = conn.execute(
            "SELECT value FROM newsletter_sequence WHERE name = ?",
            (SEQUENCE_NAME,),
        ).fetchone()
        conn.commit()
        return int(row[0])

    def check_linked_portlet(self, newsletter_id: int) -> bool:
        cur = self._sources.connection(self._plugin).execute(
            "SELECT 1 FROM newsletter_document_category WHERE id_newsletter = ? LIMIT 1",
            (newsletter_id,),
        )
        return cur.fetchone() is not None

    def select_all(self, plugin: Plugin) -> list[NewsLetter]:
        cur = self._sources.connection(plugin).execute(
            f"SELECT {_NEWSLETTER_COLUMNS} FROM newsletter_description"
        )
        return [_row_to_newsletter(row) for row in cur.fetchall()]

    def select_all_id(self, plugin: Plugin) -> list[ReferenceItem]:
        cur = self._sources.connection(plugin).execute(
            "SELECT id_newsletter, name FROM newsletter_description ORDER BY name, id_newsletter"
        )
        return [ReferenceItem(code=row[0], name=row[1]) for row in cur.fetchall()]

    # -- subscribers ---------------------------------------------------------

    def insert_subscriber(
        self,
        newsletter_id: int,
        subscriber_id: int,
        today: datetime,
        plugin: Plugin,
        *,
        validated: bool = False,
    ) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            """
            INSERT INTO newsletter_subscriber
                (id_newsletter, id_subscriber, date_subscription, is_confirmed)
            VALUES (?, ?, ?, ?)
            """,
            (newsletter_id, subscriber_id, to_db(today), int(validated)),
        )
        conn.commit()

    def delete_old_unconfirmed(self, confirm_limit_date: datetime, plugin: Plugin) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            "DELETE FROM newsletter_subscriber WHERE is_confirmed = 0 AND date_subscription < ?",
            (to_db(confirm_limit_date),),
        )
        conn.commit()

    def validate_subscriber(self, newsletter_id: int, subscriber_id: int, plugin: Plugin) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            """
            UPDATE newsletter_subscriber SET is_confirmed = 1
            WHERE id_newsletter = ? AND id_subscriber = ?
            """,
            (newsletter_id, subscriber_id),
        )
        conn.commit()

    def delete_subscriber(self, newsletter_id: int, subscriber_id: int, plugin: Plugin) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            "DELETE FROM newsletter_subscriber WHERE id_newsletter = ? AND id_subscriber = ?",
            (newsletter_id, subscriber_id),
        )
        conn.commit()

    def is_registered(self, newsletter_id: int, subscriber_id: int, plugin: Plugin) -> bool:
        cur = self._sources.connection(plugin).execute(
            "SELECT 1 FROM newsletter_subscriber WHERE id_newsletter = ? AND id_subscriber = ?",
            (newsletter_id, subscriber_id),
        )
        return cur.fetchone() is not None

    def select_nbr_subscribers(
        self, newsletter_id: int, search_string: str | None, plugin: Plugin
    ) -> int:
        return self._count_subscribers(newsletter_id, search_string, plugin, confirmed_only=False)

    def select_nbr_active_subscribers(
        self, newsletter_id: int, search_string: str | None, plugin: Plugin
    ) -> int:
        return self._count_subscribers(newsletter_id, search_string, plugin, confirmed_only=True)

    def _count_subscribers(
        self,
        newsletter_id: int,
        search_string: str | None,
        plugin: Plugin,
        *,
        confirmed_only: bool,
    ) -> int:
        confirmed = " AND s.is_confirmed = 1" if confirmed_only else ""
        if not search_string:
            sql = (
                "SELECT COUNT(*) FROM newsletter_subscriber s WHERE s.id_newsletter = ?"
                + confirmed
            )
            params: tuple = (newsletter_id,)
        else:
            sql = (
                """
                SELECT COUNT(*) FROM newsletter_subscriber s
                INNER JOIN newsletter_subscriber_details d ON s.id_subscriber = d.id_subscriber
                WHERE s.id_newsletter = ? AND d.email LIKE ? ESCAPE '\\'
                """
                + confirmed
            )
            params = (newsletter_id, _like_pattern(search_string))
        row = self._sources.connection(plugin).execute(sql, params).fetchone()
        return int(row[0])

    # -- categories and documents -------------------------------------------

    def is_template_used(self, template_id: int, plugin: Plugin) -> bool:
        cur = self._sources.connection(plugin).execute(
            "SELECT 1 FROM newsletter_description WHERE id_newsletter_template = ? LIMIT 1",
            (template_id,),
        )
        return cur.fetchone() is not None

    def select_document_list(self, portlet_id: int) -> Optional[str]:
        cur = self._sources.default_connection().execute(
            "SELECT code_document_type FROM document_list_portlet WHERE id_portlet = ?",
            (portlet_id,),
        )
        row = cur.fetchone()
        if row:
            return str(row[0])
        return None

    def select_newsletter_category_ids(self, newsletter_id: int, plugin: Plugin) -> list[int]:
        cur = self._sources.connection(plugin).execute(
            """
            SELECT id_category FROM newsletter_document_category
            WHERE id_newsletter = ?
            ORDER BY id_category
            """,
            (newsletter_id,),
        )
        return [int(row[0]) for row in cur.fetchall()]

    def associate_newsletter_document_list(
        self, newsletter_id: int, document_list_id: int, plugin: Plugin
    ) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            "INSERT INTO newsletter_document_category (id_newsletter, id_category) VALUES (?, ?)",
            (newsletter_id, document_list_id),
        )
        conn.commit()

    def delete_newsletter_document_list(self, newsletter_id: int, plugin: Plugin) -> None:
        conn = self._sources.connection(plugin)
        conn.execute(
            "DELETE FROM newsletter_document_category WHERE id_newsletter = ?",
            (newsletter_id,),
        )
        conn.commit()

    def select_documents_by_date_and_list(
        self, category_id: int, date_last_sending: datetime
    ) -> list[Document]:
        cur = self._sources.default_connection().execute(
            """
            SELECT d.id_document, d.code_document_type, d.title, d.document_summary,
                   MAX(p.date_publishing) AS published
            FROM document d
            INNER JOIN document_published p ON d.id_document = p.id_document
            INNER JOIN document_category_link c ON d.id_document = c.id_document
            WHERE c.id_category = ? AND p.date_publishing > ?
            GROUP BY d.id_document, d.code_document_type, d.title, d.document_summary
            ORDER BY published DESC, d.id_document
            """,
            (category_id, to_db(date_last_sending)),
        )
        return [
            Document(
                id=r[0],
                code_document_type=r[1],
                title=r[2],
                summary=r[3],
                date_publishing=parse(r[4]),
            )
            for r in cur.fetchall()
        ]

    def select_document_type_portlets(self) -> list[ReferenceItem]:
        cur = self._sources.default_connection().execute(
            "SELECT id_portlet, name FROM core_portlet WHERE id_portlet_type = ? ORDER BY name, id_portlet",
            (DOCUMENT_LIST_PORTLET,),
        )
        return [ReferenceItem(code=row[0], name=row[1]) for row in cur.fetchall()]
