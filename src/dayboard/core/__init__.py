"""Core board engine for Dayboard."""

from .board import ROW_COUNT, BoardSession, is_new_day
from .clock import ClockDriver, ClockSettings, ManualClock, TimeSource, fixed_hour_source, format_display, system_now
from .config_loader import (
    clear_config_cache,
    get_board_config,
    get_logging_config,
    load_config,
    resolve_config_path,
)
from .datastore import KeyValueStore, MemoryDataStore, SqliteDataStore, resolve_store_path
from .logging_utils import configure_logging
from .row_element import RowElement
from .row_registry import RowRegistry
from .row_state import (
    RowMetadata,
    TimeState,
    clock_hour_label,
    derive_time_state,
    time_state_marker,
    update_row_time_state,
)
from .task_sync import TaskSync
from .time_event import TimeEvent

__all__ = [
    "BoardSession",
    "ClockDriver",
    "ClockSettings",
    "KeyValueStore",
    "ManualClock",
    "MemoryDataStore",
    "ROW_COUNT",
    "RowElement",
    "RowMetadata",
    "RowRegistry",
    "SqliteDataStore",
    "TaskSync",
    "TimeEvent",
    "TimeSource",
    "TimeState",
    "clear_config_cache",
    "clock_hour_label",
    "configure_logging",
    "derive_time_state",
    "fixed_hour_source",
    "format_display",
    "get_board_config",
    "get_logging_config",
    "is_new_day",
    "load_config",
    "resolve_config_path",
    "resolve_store_path",
    "system_now",
    "time_state_marker",
    "update_row_time_state",
]
