from __future__ import annotations

import argparse
import os
import sqlite3
import sys
from pathlib import Path


def ensure_schema(conn: sqlite3.Connection) -> list[str]:
    # Same migrations the data sources apply when a pool is opened
    from newsletter.db.migrate import run_migrations

    conn.execute("PRAGMA foreign_keys = ON;")
    return run_migrations(conn)


def main() -> int:
    # Ensure project root (containing 'newsletter') is importable
    project_root = Path(__file__).resolve().parents[1]
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    parser = argparse.ArgumentParser(description="Initialize SQLite database schema")
    parser.add_argument(
        "--db",
        default=os.path.join("data", "newsletter.sqlite3"),
        help="Path to SQLite DB file (will be created if missing)",
    )
    args = parser.parse_args()

    db_path = os.path.abspath(args.db)
    os.makedirs(os.path.dirname(db_path), exist_ok=True)

    conn = sqlite3.connect(db_path)
    try:
        applied = ensure_schema(conn)
    finally:
        conn.close()

    print(f"Initialized schema at: {db_path} (applied: {', '.join(applied) or 'none'})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
