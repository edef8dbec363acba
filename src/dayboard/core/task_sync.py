"""Saved task notes kept in sync with a key-value store."""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any

from .config_loader import DEFAULT_TASK_SAVE_KEY
from .datastore import KeyValueStore

logger = logging.getLogger(__name__)


class TaskSync:
    """Load once, write through on save, clear everything on reset.

    The stored value is a mapping of row index (as a decimal string) to note
    text. Each operation runs under one lock so a read-modify-write never
    interleaves with another.
    """

    def __init__(self, *, store: KeyValueStore, key: str = DEFAULT_TASK_SAVE_KEY) -> None:
        self._store = store
        self._key = key
        self._lock = RLock()

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> dict[int, str]:
        with self._lock:
            raw = self._store.get(self._key, {})
        if not isinstance(raw, dict):
            return {}

        out: dict[int, str] = {}
        for key, value in raw.items():
            try:
                index = int(key)
            except (TypeError, ValueError):
                continue
            if isinstance(value, str):
                out[index] = value
        return out

    def save(self, row_index: int, note_text: str) -> None:
        def _mutate(old: Any) -> dict[str, Any]:
            data = dict(old) if isinstance(old, dict) else {}
            data[str(int(row_index))] = note_text
            return data

        with self._lock:
            self._store.update(self._key, _mutate)
        logger.debug("saved task note for row %s", row_index)

    def reset_all(self) -> None:
        def _mutate(old: Any) -> dict[str, Any]:
            if not isinstance(old, dict):
                return {}
            old.clear()
            return old

        with self._lock:
            self._store.update(self._key, _mutate)
