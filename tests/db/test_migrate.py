# mypy: ignore-errors

from __future__ import annotations

import sqlite3
from pathlib import Path

from newsletter.db.migrate import applied_versions, available_migrations, run_migrations


def test_available_migrations_sorted_numerically(tmp_path: Path) -> None:
    for name in ("V10__later.sql", "V2__second.sql", "V1__first.sql", "notes.sql"):
        (tmp_path / name).write_text("SELECT 1;")
    versions = [version for version, _ in available_migrations(tmp_path)]
    assert versions == ["1", "2", "10"]


def test_run_migrations_is_idempotent() -> None:
    conn = sqlite3.connect(":memory:")
    first = run_migrations(conn)
    assert first == ["1", "2"]
    assert run_migrations(conn) == []
    assert applied_versions(conn.cursor()) == {"1", "2"}
    conn.close()


def test_run_migrations_from_custom_directory(tmp_path: Path) -> None:
    (tmp_path / "V1__t.sql").write_text("CREATE TABLE t (x INTEGER);")
    conn = sqlite3.connect(":memory:")
    assert run_migrations(conn, tmp_path) == ["1"]
    (tmp_path / "V2__u.sql").write_text("CREATE TABLE u (y INTEGER);")
    assert run_migrations(conn, tmp_path) == ["2"]
    conn.execute("INSERT INTO u (y) VALUES (1)")
    conn.close()
