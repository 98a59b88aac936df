from __future__ import annotations

import argparse
import os
from typing import Sequence

from newsletter.plugin import DataSources, Plugin
from newsletter.repositories.sqlite.newsletters_sqlite import NewsLetterRepoSqlite
from newsletter.services.confirmation_sweep import purge_unconfirmed


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Delete newsletter subscriptions that were never confirmed"
    )
    p.add_argument("--db", metavar="PATH", help="SQLite database (defaults to settings)")
    p.add_argument(
        "--days",
        type=int,
        metavar="N",
        help="Confirmation delay in days (defaults to settings)",
    )
    return p


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Lazy import so a bad environment only fails when the values are needed
    from newsletter.config.settings import settings

    db_path = args.db or settings.db_path
    limit_days = args.days if args.days is not None else settings.confirm_limit_days
    if limit_days <= 0:
        parser.error("--days must be positive")

    if db_path != ":memory:":
        parent = os.path.dirname(os.path.abspath(db_path))
        os.makedirs(parent, exist_ok=True)

    pool = settings.db_pool
    with DataSources({pool: db_path}, default_pool=pool) as sources:
        plugin = Plugin(name="newsletter", db_pool_name=pool)
        repo = NewsLetterRepoSqlite(sources, plugin)
        cutoff = purge_unconfirmed(repo, plugin, limit_days=limit_days)

    print(f"Removed unconfirmed subscriptions registered before {cutoff.isoformat()}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
