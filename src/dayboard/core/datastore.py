"""Key-value stores with a `get` / `update(mutator)` contract."""

from __future__ import annotations

import copy
import json
import sqlite3
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from threading import RLock
from typing import Any, Protocol

from .config_loader import DEFAULT_STORE_PATH

Mutator = Callable[[Any], Any]


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def update(self, key: str, mutator: Mutator) -> None: ...


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[3]


def resolve_store_path(path: str | Path | None = None) -> Path:
    candidate = Path(path or DEFAULT_STORE_PATH)
    if not candidate.is_absolute():
        candidate = _repo_root() / candidate
    return candidate.resolve()


class MemoryDataStore:
    """Process-local store; values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._lock = RLock()
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def update(self, key: str, mutator: Mutator) -> None:
        with self._lock:
            current = copy.deepcopy(self._data.get(key))
            self._data[key] = copy.deepcopy(mutator(current))

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)


class SqliteDataStore:
    """JSON values in one SQLite table, one row per key."""

    def __init__(self, db_path: str | Path | None = None) -> None:
        self._db_path = resolve_store_path(db_path)
        self._lock = RLock()
        self.ensure_schema()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def ensure_schema(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS datastore_entries (
                    key TEXT PRIMARY KEY,
                    value_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )
        finally:
            conn.close()

    def get(self, key: str, default: Any = None) -> Any:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value_json FROM datastore_entries WHERE key = ?;", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return default
        return json.loads(row["value_json"])

    def update(self, key: str, mutator: Mutator) -> None:
        with self._lock:
            conn = self._connect()
            try:
                conn.execute("BEGIN IMMEDIATE;")
                row = conn.execute("SELECT value_json FROM datastore_entries WHERE key = ?;", (key,)).fetchone()
                current = json.loads(row["value_json"]) if row is not None else None
                value_json = json.dumps(mutator(current), ensure_ascii=False)
                conn.execute(
                    """
                    INSERT INTO datastore_entries(key, value_json, updated_at)
                    VALUES(?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value_json = excluded.value_json,
                        updated_at = excluded.updated_at;
                    """,
                    (key, value_json, datetime.now(tz=UTC).isoformat()),
                )
                conn.execute("COMMIT;")
            except Exception:
                if conn.in_transaction:
                    conn.execute("ROLLBACK;")
                raise
            finally:
                conn.close()

    def keys(self) -> list[str]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT key FROM datastore_entries ORDER BY key;").fetchall()
        finally:
            conn.close()
        return [str(row["key"]) for row in rows]
