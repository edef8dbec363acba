"""Board session: hourly rows, day-rollover reset, and save routing."""

from __future__ import annotations

import logging
from datetime import datetime
from threading import RLock
from typing import Any

from .clock import format_display
from .config_loader import DEFAULT_DISPLAY_FORMAT
from .row_element import RowElement
from .row_registry import RowRegistry
from .row_state import HOURS_PER_DAY, RowMetadata, TimeState, clock_hour_label, update_row_time_state
from .task_sync import TaskSync
from .time_event import TimeEvent

logger = logging.getLogger(__name__)

ROW_COUNT = HOURS_PER_DAY


def is_new_day(timestamp: datetime) -> bool:
    """True only for the exact 00:00:00 tick."""
    return timestamp.hour == 0 and timestamp.minute == 0 and timestamp.second == 0


class BoardSession:
    """Owns the rows of one board and everything wired to them."""

    def __init__(
        self,
        *,
        sync: TaskSync,
        event: TimeEvent | None = None,
        display_format: str = DEFAULT_DISPLAY_FORMAT,
    ) -> None:
        self.sync = sync
        self.event = event or TimeEvent()
        self.registry = RowRegistry()
        self.lock = RLock()
        self._display_format = display_format
        self._bootstrapped = False
        self.current_time_text = ""
        self.last_tick: datetime | None = None
        self.reset_count = 0

    def bootstrap(self) -> list[RowMetadata]:
        """Subscribe the clock-tick handler, load saved notes, build every row."""
        with self.lock:
            if self._bootstrapped:
                raise RuntimeError("Board session is already bootstrapped.")
            self._bootstrapped = True

            self.event.subscribe_privileged(self.clock_tick)
            saved_tasks = self.sync.load()
            rows = [self._create_row(index, saved_tasks) for index in range(ROW_COUNT)]
        logger.info("board bootstrapped with %d rows (%d saved notes)", len(rows), len(saved_tasks))
        return rows

    def _create_row(self, index: int, saved_tasks: dict[int, str]) -> RowMetadata:
        total_hours = index % HOURS_PER_DAY
        element = RowElement(
            element_id=f"row-{index}",
            save_trigger_id=f"save-btn-{index}",
            text=saved_tasks.get(index, ""),
        )
        row = RowMetadata(
            row_index=index,
            total_hours=total_hours,
            element=element,
            clock_label=clock_hour_label(total_hours),
        )
        self.event.subscribe(lambda current_time: update_row_time_state(row, current_time))
        self.registry.register(element.save_trigger_id, row)
        return row

    @property
    def rows(self) -> list[RowMetadata]:
        return list(self.registry.rows())

    def clock_tick(self, current_time: datetime) -> None:
        with self.lock:
            self.current_time_text = format_display(current_time, self._display_format)
            self.last_tick = current_time
            if is_new_day(current_time):
                self.reset_saved_tasks()

    def reset_saved_tasks(self) -> None:
        """Clear every saved note and every row's text; time states stay as-is."""
        with self.lock:
            self.sync.reset_all()
            for row in self.registry.rows():
                row.note_text = ""
            self.reset_count += 1
        logger.info("day rollover: cleared saved task notes")

    def save_row(self, save_id: str, text: str | None = None) -> dict[str, Any]:
        with self.lock:
            row = self.registry.get(save_id)
            if row is None:
                logger.debug("save ignored for unknown trigger %s", save_id)
                return {"ok": True, "saved": False, "reason": "unknown_row"}
            if row.current_time_state is TimeState.BEFORE:
                logger.debug("save rejected for locked row %s", row.row_index)
                return {"ok": True, "saved": False, "reason": "row_locked", "row_index": row.row_index}

            if text is not None:
                row.note_text = text
            self.sync.save(row.row_index, row.note_text)
            return {"ok": True, "saved": True, "row_index": row.row_index, "text": row.note_text}

    def snapshot(self) -> dict[str, Any]:
        with self.lock:
            return {
                "ok": True,
                "current_time": self.current_time_text,
                "last_tick": self.last_tick.isoformat() if self.last_tick else None,
                "reset_count": self.reset_count,
                "rows": [row.to_dict() for row in self.registry.rows()],
            }
