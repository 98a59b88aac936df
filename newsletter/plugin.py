from __future__ import annotations

import sqlite3
from typing import Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .db.migrate import run_migrations
from .logging_config import get_logger

DEFAULT_POOL = "portal"

logger = get_logger()


class Plugin(BaseModel):
    """Context passed to every store call to select a data source.

    >>> Plugin(name="newsletter").db_pool_name
    'portal'
    """

    name: str = Field(..., min_length=1, description="Plugin name")
    db_pool_name: str = Field(default=DEFAULT_POOL, description="Data source pool to use")

    model_config = ConfigDict(frozen=True)


class DataSources:
    """Registry of SQLite data sources keyed by pool name.

    Each pool is opened lazily on first use, with foreign keys enabled and all
    pending migrations applied. The same connection is then reused for every
    call that targets the pool, which keeps ``:memory:`` pools alive.

    Calls that do not receive a :class:`Plugin` (portal tables such as
    documents and portlets) go to ``default_pool``.
    """

    def __init__(
        self,
        pools: Mapping[str, str],
        *,
        default_pool: str = DEFAULT_POOL,
        connect: Callable[[str], sqlite3.Connection] = sqlite3.connect,
    ) -> None:
        if default_pool not in pools:
            raise LookupError(f"Default pool '{default_pool}' is not configured")
        self._pools = dict(pools)
        self._default_pool = default_pool
        self._connect = connect
        self._open: dict[str, sqlite3.Connection] = {}

    @property
    def default_pool(self) -> str:
        return self._default_pool

    def connection(self, plugin: Plugin) -> sqlite3.Connection:
        """Return the connection of the pool selected by ``plugin``."""
        return self.pool(plugin.db_pool_name)

    def default_connection(self) -> sqlite3.Connection:
        return self.pool(self._default_pool)

    def pool(self, name: str) -> sqlite3.Connection:
        conn = self._open.get(name)
        if conn is not None:
            return conn
        try:
            path = self._pools[name]
        except KeyError:
            raise LookupError(f"No data source configured for pool '{name}'") from None
        conn = self._connect(path)
        conn.execute("PRAGMA foreign_keys = ON;")
        run_migrations(conn)
        self._open[name] = conn
        logger.debug("Opened data source", extra={"pool": name, "path": path})
        return conn

    def close(self) -> None:
        for name, conn in list(self._open.items()):
            conn.close()
            del self._open[name]

    def __enter__(self) -> "DataSources":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
