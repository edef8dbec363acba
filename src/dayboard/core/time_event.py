"""Timestamp broadcast event with a privileged first tier."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from threading import Lock

TimeListener = Callable[[datetime], object]


class TimeEvent:
    """Broadcast one timestamp to privileged listeners, then ordinary ones.

    Both tiers run in registration order. Listener exceptions are not caught,
    so a failing listener stops delivery to the listeners after it.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._privileged: list[TimeListener] = []
        self._ordinary: list[TimeListener] = []

    def subscribe(self, callback: TimeListener) -> None:
        with self._lock:
            self._ordinary.append(callback)

    def subscribe_privileged(self, callback: TimeListener) -> None:
        """Register a listener that runs before every ordinary listener."""
        with self._lock:
            self._privileged.append(callback)

    def publish(self, timestamp: datetime) -> None:
        with self._lock:
            listeners = [*self._privileged, *self._ordinary]
        for callback in listeners:
            callback(timestamp)

    def listener_counts(self) -> dict[str, int]:
        with self._lock:
            return {"privileged": len(self._privileged), "ordinary": len(self._ordinary)}
