"""Simple SQLite migration runner."""

from __future__ import annotations

import re
import sqlite3
from pathlib import Path
from typing import Iterable

from ..logging_config import get_logger

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

logger = get_logger()


def applied_versions(cursor: sqlite3.Cursor) -> set[str]:
    cursor.execute("CREATE TABLE IF NOT EXISTS schema_migrations (version TEXT PRIMARY KEY)")
    rows = cursor.execute("SELECT version FROM schema_migrations").fetchall()
    return {row[0] for row in rows}


def available_migrations(directory: Path = MIGRATIONS_DIR) -> Iterable[tuple[str, Path]]:
    pattern = re.compile(r"V(\d+)__.+\.sql$")
    found = []
    for path in directory.glob("V*__*.sql"):
        match = pattern.match(path.name)
        if match:
            found.append((match.group(1), path))
    # V10 must come after V9
    return sorted(found, key=lambda item: int(item[0]))


def run_migrations(conn: sqlite3.Connection, directory: Path = MIGRATIONS_DIR) -> list[str]:
    """Apply pending migrations to ``conn`` and return the versions applied."""
    cursor = conn.cursor()
    done = applied_versions(cursor)
    applied: list[str] = []
    for version, path in available_migrations(directory):
        if version in done:
            continue
        sql = path.read_text(encoding="utf-8")
        cursor.executescript(sql)
        cursor.execute("INSERT INTO schema_migrations (version) VALUES (?)", (version,))
        conn.commit()
        applied.append(version)
        logger.info("Applied migration", extra={"version": version, "file": path.name})
    return applied


if __name__ == "__main__":  # pragma: no cover
    from ..config.settings import settings

    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(settings.db_path) as _conn:
        run_migrations(_conn)
