from datetime import datetime

import pytest

from src.dayboard.core.board import ROW_COUNT, BoardSession, is_new_day
from src.dayboard.core.datastore import MemoryDataStore
from src.dayboard.core.row_state import TimeState
from src.dayboard.core.task_sync import TaskSync


class _CountingSync(TaskSync):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.loads = 0
        self.resets = 0

    def load(self):
        self.loads += 1
        return super().load()

    def reset_all(self):
        self.resets += 1
        super().reset_all()


def _session(saved: dict[str, str] | None = None) -> tuple[BoardSession, MemoryDataStore, _CountingSync]:
    store = MemoryDataStore({"saved-tasks": saved} if saved is not None else None)
    sync = _CountingSync(store=store)
    session = BoardSession(sync=sync, display_format="%Y-%m-%d %H:%M:%S")
    session.bootstrap()
    return session, store, sync


def test_is_new_day_requires_exact_midnight():
    assert is_new_day(datetime(2026, 10, 20, 0, 0, 0)) is True
    assert is_new_day(datetime(2026, 10, 20, 0, 0, 1)) is False
    assert is_new_day(datetime(2026, 10, 20, 0, 1, 0)) is False
    assert is_new_day(datetime(2026, 10, 20, 12, 0, 0)) is False


def test_bootstrap_builds_one_row_per_hour_seeded_from_saved_tasks():
    session, _store, sync = _session({"5": "lunch"})

    rows = session.rows
    assert len(rows) == ROW_COUNT == 24
    assert [row.total_hours for row in rows] == list(range(24))
    assert rows[5].note_text == "lunch"
    assert all(row.note_text == "" for row in rows if row.row_index != 5)
    assert all(row.current_time_state is None for row in rows)
    assert sync.loads == 1
    assert session.event.listener_counts() == {"privileged": 1, "ordinary": 24}


def test_bootstrap_twice_raises():
    session, _store, _sync = _session()
    with pytest.raises(RuntimeError, match="already bootstrapped"):
        session.bootstrap()


def test_publish_updates_every_row_and_time_display():
    session, _store, _sync = _session()
    session.event.publish(datetime(2026, 10, 19, 14, 0, 0))

    rows = session.rows
    assert session.current_time_text == "2026-10-19 14:00:00"
    assert rows[10].current_time_state is TimeState.BEFORE
    assert rows[10].element.disabled is True
    assert rows[14].current_time_state is TimeState.CURRENT
    assert rows[14].element.disabled is False
    assert rows[18].current_time_state is TimeState.AFTER
    assert rows[18].element.disabled is False


def test_save_row_writes_through_and_round_trips():
    session, store, sync = _session()
    session.event.publish(datetime(2026, 10, 19, 9, 0, 0))

    out = session.save_row("save-btn-12", "lunch with sam")
    assert out == {"ok": True, "saved": True, "row_index": 12, "text": "lunch with sam"}
    assert store.get("saved-tasks") == {"12": "lunch with sam"}
    assert sync.load()[12] == "lunch with sam"


def test_save_row_without_text_persists_current_element_text():
    session, store, _sync = _session({"20": "dinner"})
    session.event.publish(datetime(2026, 10, 19, 9, 0, 0))
    out = session.save_row("save-btn-20")
    assert out["saved"] is True
    assert store.get("saved-tasks") == {"20": "dinner"}


def test_save_rejected_for_row_in_before_state():
    session, store, _sync = _session({"3": "old"})
    session.event.publish(datetime(2026, 10, 19, 14, 0, 0))

    out = session.save_row("save-btn-3", "rewrite history")
    assert out["saved"] is False
    assert out["reason"] == "row_locked"
    assert store.get("saved-tasks") == {"3": "old"}
    assert session.rows[3].note_text == "old"


def test_save_for_unknown_trigger_is_silent_noop():
    session, store, _sync = _session()
    out = session.save_row("not-a-button", "x")
    assert out == {"ok": True, "saved": False, "reason": "unknown_row"}
    assert store.get("saved-tasks") is None


def test_midnight_tick_resets_before_rows_see_it():
    session, store, sync = _session({"1": "a", "22": "b"})
    session.event.publish(datetime(2026, 10, 19, 23, 59, 59))
    states_before = [row.current_time_state for row in session.rows]

    seen_texts: list[str] = []
    session.event.subscribe(lambda _ts: seen_texts.append(session.rows[22].note_text))

    session.event.publish(datetime(2026, 10, 20, 0, 0, 0))

    assert sync.resets == 1
    assert store.get("saved-tasks") == {}
    assert all(row.note_text == "" for row in session.rows)
    assert seen_texts == [""]
    assert session.reset_count == 1
    # Rows re-evaluate after the reset on the same tick.
    assert session.rows[0].current_time_state is TimeState.CURRENT
    assert states_before[0] is TimeState.BEFORE


def test_one_second_past_midnight_does_not_reset():
    session, store, sync = _session({"1": "a"})
    session.event.publish(datetime(2026, 10, 20, 0, 0, 1))
    assert sync.resets == 0
    assert store.get("saved-tasks") == {"1": "a"}


def test_reset_leaves_time_state_untouched():
    session, _store, _sync = _session({"8": "a"})
    session.event.publish(datetime(2026, 10, 19, 12, 0, 0))
    session.reset_saved_tasks()
    assert session.rows[8].note_text == ""
    assert session.rows[8].current_time_state is TimeState.BEFORE
    assert session.rows[8].element.disabled is True


def test_snapshot_shape():
    session, _store, _sync = _session({"5": "lunch"})
    session.event.publish(datetime(2026, 10, 19, 5, 0, 0))
    snap = session.snapshot()
    assert snap["ok"] is True
    assert snap["current_time"] == "2026-10-19 05:00:00"
    assert snap["last_tick"] == "2026-10-19T05:00:00"
    assert len(snap["rows"]) == 24
    row5 = snap["rows"][5]
    assert row5["label"] == "5am"
    assert row5["time_state"] == "current"
    assert row5["markers"] == ["time-state-current"]
    assert row5["text"] == "lunch"
    assert row5["save_id"] == "save-btn-5"
