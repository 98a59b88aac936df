from __future__ import annotations

from datetime import datetime, timedelta, timezone

from ..logging_config import get_logger
from ..plugin import Plugin
from ..repositories.newsletters import NewsLetterRepo

logger = get_logger()


def confirmation_cutoff(now: datetime, limit_days: int) -> datetime:
    """Return the registration date before which unconfirmed subscriptions expire.

    >>> confirmation_cutoff(datetime(2024, 3, 10, tzinfo=timezone.utc), 7).isoformat()
    '2024-03-03T00:00:00+00:00'
    """
    if limit_days <= 0:
        raise ValueError("limit_days must be positive")
    return now - timedelta(days=limit_days)


def purge_unconfirmed(
    repo: NewsLetterRepo,
    plugin: Plugin,
    *,
    limit_days: int,
    now: datetime | None = None,
) -> datetime:
    """Delete subscriptions left unconfirmed for more than ``limit_days``.

    Meant to be run periodically by an external scheduler. Returns the cutoff
    that was applied.
    """
    current = now if now is not None else datetime.now(timezone.utc)
    cutoff = confirmation_cutoff(current, limit_days)
    repo.delete_old_unconfirmed(cutoff, plugin)
    logger.info(
        "Purged unconfirmed subscriptions",
        extra={"pool": plugin.db_pool_name, "cutoff": cutoff.isoformat(), "limit_days": limit_days},
    )
    return cutoff
