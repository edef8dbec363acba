"""Clock heartbeat that publishes wall-clock timestamps on a `TimeEvent`."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from threading import Event, RLock, Thread
from typing import Any

from .time_event import TimeEvent

logger = logging.getLogger(__name__)

TimeSource = Callable[[], datetime]


def system_now() -> datetime:
    """Local wall-clock time."""
    return datetime.now()


def fixed_hour_source(hour: int | None = None) -> TimeSource:
    """Return a time source that reports "now" with the hour pinned.

    `hour=None` keeps the real hour. Used to preview the board at other hours.
    """
    if hour is not None and not 0 <= int(hour) <= 23:
        raise ValueError(f"hour must be within 0-23, got {hour!r}")

    def _now() -> datetime:
        now = datetime.now()
        return now if hour is None else now.replace(hour=int(hour))

    return _now


class ManualClock:
    """Settable time source for deterministic runs."""

    def __init__(self, start: datetime) -> None:
        self._lock = RLock()
        self._now = start

    def __call__(self) -> datetime:
        with self._lock:
            return self._now

    def set(self, value: datetime) -> None:
        with self._lock:
            self._now = value

    def advance(self, *, seconds: float = 1.0) -> datetime:
        with self._lock:
            self._now = self._now + timedelta(seconds=seconds)
            return self._now


def format_display(timestamp: datetime, fmt: str = "%c") -> str:
    return timestamp.strftime(fmt)


@dataclass(slots=True)
class ClockSettings:
    tick_interval_sec: float = 1.0


class ClockDriver:
    """Owns a single daemon thread that publishes one timestamp per tick."""

    def __init__(
        self,
        *,
        event: TimeEvent,
        time_source: TimeSource | None = None,
        guard: RLock | None = None,
        settings: ClockSettings | None = None,
    ) -> None:
        self._event = event
        self._time_source: TimeSource = time_source or system_now
        self._guard = guard or RLock()
        self._settings = settings or ClockSettings()
        self._lock = RLock()
        self._stop = Event()
        self._thread: Thread | None = None
        self._tick_count = 0
        self._last_tick: datetime | None = None

    @property
    def time_source(self) -> TimeSource:
        return self._time_source

    def set_time_source(self, time_source: TimeSource | None) -> None:
        with self._lock:
            self._time_source = time_source or system_now

    def now(self) -> datetime:
        with self._lock:
            source = self._time_source
        return source()

    def tick(self) -> datetime:
        """Read the time source once and publish the result."""
        timestamp = self.now()
        with self._guard:
            self._event.publish(timestamp)
        with self._lock:
            self._tick_count += 1
            self._last_tick = timestamp
        return timestamp

    def start(self, *, settings: ClockSettings | None = None) -> dict[str, Any]:
        with self._lock:
            if settings is not None:
                self._settings = settings
            if self._thread is not None and self._thread.is_alive():
                if self._stop.is_set():
                    return {"ok": False, "running": True, "error": "clock_driver_stopping"}
                return {"ok": True, "running": True, "already_running": True}

        # Initial state reflects "now" without waiting one interval.
        self.tick()

        with self._lock:
            self._stop.clear()
            self._thread = Thread(target=self._run_loop, daemon=True, name="dayboard-clock-driver")
            self._thread.start()
        logger.info("clock driver started (interval=%ss)", self._settings.tick_interval_sec)
        return {"ok": True, "running": True, "already_running": False}

    def stop(self, *, timeout: float = 2.0) -> dict[str, Any]:
        with self._lock:
            thread = self._thread
            self._stop.set()
        if thread is not None and thread.is_alive():
            thread.join(timeout=timeout)
        with self._lock:
            still_running = thread is not None and thread.is_alive()
            # Keep the reference so a restart cannot add a second heartbeat.
            if not still_running:
                self._thread = None
        if still_running:
            logger.warning("clock driver did not stop within %ss; tick still in progress", timeout)
            return {"ok": False, "running": True, "error": "clock_driver_stopping"}
        if thread is not None:
            logger.info("clock driver stopped after %d ticks", self._tick_count)
        return {"ok": True, "running": False}

    def status(self) -> dict[str, Any]:
        with self._lock:
            running = self._thread is not None and self._thread.is_alive()
            return {
                "ok": True,
                "running": running,
                "settings": {"tick_interval_sec": float(self._settings.tick_interval_sec)},
                "tick_count": self._tick_count,
                "last_tick": self._last_tick.isoformat() if self._last_tick else None,
            }

    def _run_loop(self) -> None:
        while not self._stop.wait(timeout=max(0.01, float(self._settings.tick_interval_sec))):
            try:
                self.tick()
            except Exception:
                logger.exception("clock tick listener failed; continuing with next tick")
