"""Shared runtime ownership facade for daemon/app entrypoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Any

from src.dayboard.core.board import BoardSession
from src.dayboard.core.clock import ClockDriver, ClockSettings, TimeSource, fixed_hour_source
from src.dayboard.core.config_loader import (
    DEFAULT_DISPLAY_FORMAT,
    DEFAULT_STORE_PATH,
    DEFAULT_TASK_SAVE_KEY,
    DEFAULT_TICK_INTERVAL_SEC,
    get_board_config,
    load_config,
)
from src.dayboard.core.datastore import KeyValueStore, SqliteDataStore
from src.dayboard.core.task_sync import TaskSync

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BoardRuntimeSettings:
    tick_interval_sec: float = DEFAULT_TICK_INTERVAL_SEC
    store_path: str = DEFAULT_STORE_PATH
    task_save_key: str = DEFAULT_TASK_SAVE_KEY
    display_format: str = DEFAULT_DISPLAY_FORMAT
    fake_hour: int | None = None


def load_runtime_settings(config: dict[str, Any] | None = None) -> BoardRuntimeSettings:
    if config is None:
        try:
            config = load_config()
        except (FileNotFoundError, ValueError):
            return BoardRuntimeSettings()
    board = get_board_config(config)
    return BoardRuntimeSettings(
        tick_interval_sec=board["tick_interval_sec"],
        store_path=board["store_path"],
        task_save_key=board["task_save_key"],
        display_format=board["display_format"],
        fake_hour=board["fake_hour"],
    )


class RuntimeService:
    """Single authority for board lifecycle + app-facing operations."""

    def __init__(
        self,
        *,
        settings: BoardRuntimeSettings | None = None,
        store: KeyValueStore | None = None,
        time_source: TimeSource | None = None,
    ) -> None:
        self._lock = RLock()
        self._settings = settings
        self._store = store
        self._time_source = time_source
        self._session: BoardSession | None = None
        self._driver: ClockDriver | None = None
        self._started = False
        self._last_start_source: str | None = None
        self._last_stop_source: str | None = None

    @property
    def session(self) -> BoardSession | None:
        return self._session

    def _resolve_time_source(self, settings: BoardRuntimeSettings, fake_hour: int | None) -> TimeSource | None:
        if self._time_source is not None:
            return self._time_source
        hour = fake_hour if fake_hour is not None else settings.fake_hour
        return fixed_hour_source(hour) if hour is not None else None

    def start(self, *, source: str = "runtime", fake_hour: int | None = None) -> dict[str, Any]:
        with self._lock:
            if self._started:
                return {"ok": True, "source": "runtime_service", "already_started": True, "started": True}

            settings = self._settings or load_runtime_settings()
            self._settings = settings
            store = self._store or SqliteDataStore(settings.store_path)
            session = BoardSession(
                sync=TaskSync(store=store, key=settings.task_save_key),
                display_format=settings.display_format,
            )
            session.bootstrap()
            driver = ClockDriver(
                event=session.event,
                time_source=self._resolve_time_source(settings, fake_hour),
                guard=session.lock,
                settings=ClockSettings(tick_interval_sec=settings.tick_interval_sec),
            )
            driver.start()

            self._session = session
            self._driver = driver
            self._started = True
            self._last_start_source = source
        logger.info("board runtime started (source=%s)", source)
        return {
            "ok": True,
            "source": "runtime_service",
            "already_started": False,
            "started": True,
            "start_source": source,
        }

    def stop(self, *, source: str = "runtime") -> dict[str, Any]:
        with self._lock:
            driver = self._driver
            self._driver = None
            self._session = None
            self._started = False
            self._last_stop_source = source
        if driver is not None:
            driver.stop()
        logger.info("board runtime stopped (source=%s)", source)
        return {"ok": True, "source": "runtime_service", "stopped": True, "stop_source": source}

    def health(self) -> dict[str, Any]:
        with self._lock:
            driver = self._driver
            session = self._session
            out: dict[str, Any] = {
                "ok": True,
                "source": "runtime_service",
                "runtime": {
                    "started": self._started,
                    "last_start_source": self._last_start_source,
                    "last_stop_source": self._last_stop_source,
                },
            }
        out["clock"] = driver.status() if driver is not None else {"running": False}
        out["board"] = (
            {
                "rows": len(session.registry),
                "listeners": session.event.listener_counts(),
                "reset_count": session.reset_count,
            }
            if session is not None
            else {}
        )
        return out

    def board(self) -> dict[str, Any]:
        session = self._session
        if session is None:
            return {"ok": False, "error": "runtime_not_started"}
        return session.snapshot()

    def save_task(self, *, save_id: str, text: str | None = None) -> dict[str, Any]:
        session = self._session
        if session is None:
            return {"ok": False, "error": "runtime_not_started"}
        return session.save_row(save_id, text)

    def set_time_source(self, time_source: TimeSource | None) -> dict[str, Any]:
        with self._lock:
            self._time_source = time_source
            driver = self._driver
        if driver is not None:
            driver.set_time_source(time_source)
        return {"ok": True, "custom_time_source": time_source is not None}


_RUNTIME_SERVICE: RuntimeService | None = None


def get_runtime_service() -> RuntimeService:
    global _RUNTIME_SERVICE
    if _RUNTIME_SERVICE is None:
        _RUNTIME_SERVICE = RuntimeService()
    return _RUNTIME_SERVICE
