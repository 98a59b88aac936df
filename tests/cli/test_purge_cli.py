# mypy: ignore-errors

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from newsletter.cli import purge
from newsletter.config import settings as settings_module
from newsletter.config.settings import Settings
from newsletter.plugin import DataSources, Plugin
from newsletter.repositories.newsletters import NewsLetter
from newsletter.repositories.sqlite.newsletters_sqlite import NewsLetterRepoSqlite

PLUGIN = Plugin(name="newsletter")


@pytest.fixture(autouse=True)
def fixed_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Settings:
    cfg = Settings(db_path=str(tmp_path / "default.sqlite3"), db_pool="portal", confirm_limit_days=7)
    monkeypatch.setattr(settings_module, "settings", cfg)
    return cfg


def _seed(db_path: Path) -> int:
    now = datetime.now(timezone.utc)
    with DataSources({"portal": str(db_path)}) as sources:
        repo = NewsLetterRepoSqlite(sources)
        nid = repo.new_primary_key(PLUGIN)
        repo.insert(NewsLetter(id=nid, name="Weekly"), PLUGIN)
        repo.insert_subscriber(nid, 1, now - timedelta(days=10), PLUGIN)
        repo.insert_subscriber(nid, 2, now - timedelta(days=3), PLUGIN)
    return nid


def _subscribers(db_path: Path) -> set[int]:
    conn = sqlite3.connect(db_path)
    try:
        return {row[0] for row in conn.execute("SELECT id_subscriber FROM newsletter_subscriber")}
    finally:
        conn.close()


def test_purge_cli_uses_days_argument(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    db_path = tmp_path / "nl.sqlite3"
    _seed(db_path)

    assert purge.main(["--db", str(db_path), "--days", "2"]) == 0
    assert _subscribers(db_path) == set()
    assert "Removed unconfirmed subscriptions" in capsys.readouterr().out


def test_purge_cli_defaults_to_settings(fixed_settings: Settings) -> None:
    db_path = Path(fixed_settings.db_path)
    _seed(db_path)

    assert purge.main([]) == 0
    assert _subscribers(db_path) == {2}


def test_purge_cli_rejects_non_positive_days(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        purge.main(["--db", str(tmp_path / "x.sqlite3"), "--days", "0"])
