"""Per-row time state derived from the latest observed hour."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .row_element import RowElement

HOURS_PER_DAY = 24


class TimeState(str, Enum):
    """Where a row's hour sits relative to the current hour.

    BEFORE means the row's hour is already behind now (a past row, locked).
    AFTER means the row's hour is still upcoming.
    """

    BEFORE = "before"
    CURRENT = "current"
    AFTER = "after"


def derive_time_state(row_hour: int, current_hour: int) -> TimeState:
    if current_hour == row_hour:
        return TimeState.CURRENT
    if current_hour > row_hour:
        return TimeState.BEFORE
    return TimeState.AFTER


def time_state_marker(state: TimeState) -> str:
    return f"time-state-{state.value}"


def clock_hour_label(index: int) -> str:
    """Return the 12-hour label for a row index: 12am, 1am, ..., 11pm."""
    value = (index + 11) % 12 + 1
    postfix = "am" if (index // 12) % 2 == 0 else "pm"
    return f"{value}{postfix}"


@dataclass(slots=True)
class RowMetadata:
    row_index: int
    total_hours: int
    element: RowElement
    clock_label: str = ""
    current_time_state: TimeState | None = field(default=None)

    @property
    def note_text(self) -> str:
        return self.element.get_text()

    @note_text.setter
    def note_text(self, value: str) -> None:
        self.element.set_text(value)

    @property
    def locked(self) -> bool:
        return self.current_time_state is TimeState.BEFORE

    def to_dict(self) -> dict[str, Any]:
        state = self.current_time_state
        return {
            "row_index": self.row_index,
            "hour": self.total_hours,
            "label": self.clock_label,
            "time_state": state.value if state is not None else None,
            "locked": self.locked,
            **self.element.to_dict(),
        }


def update_row_time_state(row: RowMetadata, current_time: datetime) -> bool:
    """Move the row to the state for `current_time`; return True on transition.

    No side effects when the state is unchanged.
    """
    state = derive_time_state(row.total_hours, current_time.hour)
    if state == row.current_time_state:
        return False

    element = row.element
    if row.current_time_state is not None:
        element.remove_marker(time_state_marker(row.current_time_state))
    row.current_time_state = state
    element.add_marker(time_state_marker(state))
    element.set_disabled(state is TimeState.BEFORE)
    return True
