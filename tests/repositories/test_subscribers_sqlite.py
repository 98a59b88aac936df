# mypy: ignore-errors

from __future__ import annotations

import pytest

from newsletter.plugin import DataSources, Plugin
from newsletter.repositories.sqlite.subscribers_sqlite import SubscribersRepoSqlite
from newsletter.repositories.subscribers import Subscriber

PLUGIN = Plugin(name="newsletter")


def test_subscribers_crud() -> None:
    sources = DataSources({"portal": ":memory:"})
    repo = SubscribersRepoSqlite(sources)

    sid = repo.insert(Subscriber(id=None, email="Jane@Example.org"), PLUGIN)
    explicit = repo.insert(Subscriber(id=50, email="joe@example.org"), PLUGIN)
    assert explicit == 50
    assert repo.load(sid, PLUGIN) == Subscriber(id=sid, email="Jane@Example.org")
    assert repo.find_by_email("jane@example.ORG", PLUGIN).id == sid
    assert repo.find_by_email("nobody@example.org", PLUGIN) is None

    repo.delete(sid, PLUGIN)
    assert repo.load(sid, PLUGIN) is None
    assert repo.load(50, PLUGIN).email == "joe@example.org"
    sources.close()


def test_insert_raises_without_lastrowid(monkeypatch: pytest.MonkeyPatch) -> None:
    sources = DataSources({"portal": ":memory:"})
    repo = SubscribersRepoSqlite(sources)

    class DummyCur:
        lastrowid = None

    class StubConn:
        def execute(self, *a, **kw):
            return DummyCur()

        def commit(self) -> None:
            pass

    monkeypatch.setattr(sources, "connection", lambda plugin: StubConn())
    with pytest.raises(RuntimeError):
        repo.insert(Subscriber(id=None, email="x@example.org"), PLUGIN)
    sources.close()
