# mypy: ignore-errors

from __future__ import annotations

import sqlite3

import pytest
from pydantic import ValidationError

from newsletter.plugin import DataSources, Plugin


def test_plugin_defaults_and_is_frozen() -> None:
    plugin = Plugin(name="newsletter")
    assert plugin.db_pool_name == "portal"
    with pytest.raises(ValidationError):
        plugin.name = "other"
    with pytest.raises(ValidationError):
        Plugin(name="")


def test_connection_is_opened_once_per_pool() -> None:
    opened: list[str] = []

    def connect(path: str) -> sqlite3.Connection:
        opened.append(path)
        return sqlite3.connect(":memory:")

    sources = DataSources({"portal": "a.db", "mailing": "b.db"}, connect=connect)
    first = sources.connection(Plugin(name="newsletter"))
    assert sources.default_connection() is first
    assert sources.connection(Plugin(name="newsletter", db_pool_name="mailing")) is not first
    assert opened == ["a.db", "b.db"]
    sources.close()


def test_opened_pool_has_schema_and_foreign_keys() -> None:
    with DataSources({"portal": ":memory:"}) as sources:
        conn = sources.default_connection()
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        assert {"newsletter_description", "newsletter_subscriber", "document"} <= tables


def test_unknown_pool_raises_lookup_error() -> None:
    sources = DataSources({"portal": ":memory:"})
    with pytest.raises(LookupError):
        sources.connection(Plugin(name="newsletter", db_pool_name="missing"))
    with pytest.raises(LookupError):
        DataSources({"portal": ":memory:"}, default_pool="other")


def test_close_forgets_connections() -> None:
    sources = DataSources({"portal": ":memory:"})
    first = sources.default_connection()
    sources.close()
    with pytest.raises(sqlite3.ProgrammingError):
        first.execute("SELECT 1")
    assert sources.default_connection() is not first
    sources.close()
