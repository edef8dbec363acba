from pathlib import Path

import pytest

from src.dayboard.core.datastore import MemoryDataStore, SqliteDataStore, resolve_store_path


def test_memory_store_update_receives_none_when_missing():
    store = MemoryDataStore()
    seen = []

    def mutate(old):
        seen.append(old)
        return {"a": 1}

    store.update("k", mutate)
    assert seen == [None]
    assert store.get("k") == {"a": 1}
    assert store.get("other", "fallback") == "fallback"
    assert store.keys() == ["k"]


def test_memory_store_returns_copies():
    store = MemoryDataStore({"k": {"a": 1}})
    value = store.get("k")
    value["a"] = 99
    assert store.get("k") == {"a": 1}


def test_sqlite_store_round_trips_across_instances(tmp_path: Path):
    db_path = tmp_path / "nested" / "board.sqlite3"
    store = SqliteDataStore(db_path)
    assert store.get("saved-tasks", {}) == {}

    store.update("saved-tasks", lambda old: {**(old or {}), "5": "lunch"})
    store.update("saved-tasks", lambda old: {**(old or {}), "9": "standup"})

    reopened = SqliteDataStore(db_path)
    assert reopened.get("saved-tasks") == {"5": "lunch", "9": "standup"}
    assert reopened.keys() == ["saved-tasks"]


def test_sqlite_store_rolls_back_when_mutator_fails(tmp_path: Path):
    store = SqliteDataStore(tmp_path / "board.sqlite3")
    store.update("k", lambda _old: {"a": 1})

    def broken(_old):
        raise RuntimeError("bad mutator")

    with pytest.raises(RuntimeError, match="bad mutator"):
        store.update("k", broken)
    assert store.get("k") == {"a": 1}


def test_resolve_store_path_keeps_absolute_paths(tmp_path: Path):
    target = tmp_path / "x.sqlite3"
    assert resolve_store_path(target) == target.resolve()
    assert resolve_store_path("memory/x.sqlite3").is_absolute()
