"""Application settings for the newsletter data sources.

Environment variables are loaded from a ``.env`` file using ``python-dotenv``
and exposed through a Pydantic settings object.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Load environment variables from a .env file if present
load_dotenv()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_DB_PATH = os.path.join("data", "newsletter.sqlite3")
DEFAULT_POOL = "portal"
DEFAULT_CONFIRM_LIMIT_DAYS = 7


class Settings(BaseModel):
    """Immutable settings object used across the application."""

    db_path: str = DEFAULT_DB_PATH
    db_pool: str = DEFAULT_POOL
    confirm_limit_days: int = DEFAULT_CONFIRM_LIMIT_DAYS

    model_config = ConfigDict(frozen=True)


def _build_settings() -> Settings:
    """Construct the ``Settings`` instance based on environment variables."""

    db_path = os.getenv("NEWSLETTER_DB_PATH") or DEFAULT_DB_PATH
    db_pool = os.getenv("NEWSLETTER_DB_POOL") or DEFAULT_POOL

    raw_days = os.getenv("NEWSLETTER_CONFIRM_LIMIT_DAYS")
    if raw_days is None or raw_days.strip() == "":
        limit_days = DEFAULT_CONFIRM_LIMIT_DAYS
    else:
        try:
            limit_days = int(raw_days)
        except ValueError:
            raise RuntimeError(
                f"NEWSLETTER_CONFIRM_LIMIT_DAYS must be an integer, got {raw_days!r}"
            ) from None
        if limit_days <= 0:
            raise RuntimeError("NEWSLETTER_CONFIRM_LIMIT_DAYS must be positive")

    return Settings(db_path=db_path, db_pool=db_pool, confirm_limit_days=limit_days)


# Public settings instance
settings = _build_settings()
