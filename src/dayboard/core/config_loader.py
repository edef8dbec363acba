"""Load and query Dayboard JSON config files."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path("config/config.json")
DEFAULT_STORE_PATH = "memory/dayboard.sqlite3"
DEFAULT_TASK_SAVE_KEY = "saved-tasks"
DEFAULT_DISPLAY_FORMAT = "%c"
DEFAULT_TICK_INTERVAL_SEC = 1.0
_CONFIG_CACHE: dict[Path, tuple[int, dict[str, Any]]] = {}


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[3]


def resolve_config_path(config_path: str | Path | None = None) -> Path:
    """Resolve config path against repo root.

    Priority:
    1. explicit function argument
    2. `DAYBOARD_CONFIG_PATH` environment variable
    3. default `config/config.json`
    """
    raw_path: str | Path | None = config_path or os.getenv("DAYBOARD_CONFIG_PATH")
    candidate = Path(raw_path) if raw_path else DEFAULT_CONFIG_PATH
    if not candidate.is_absolute():
        candidate = _repo_root() / candidate
    return candidate.resolve()


def load_config(config_path: str | Path | None = None, *, use_cache: bool = True) -> dict[str, Any]:
    """Load config JSON as a dictionary."""
    resolved = resolve_config_path(config_path)
    if not resolved.exists():
        raise FileNotFoundError(f"Config file not found: {resolved}")

    mtime_ns = resolved.stat().st_mtime_ns
    if use_cache and resolved in _CONFIG_CACHE:
        cached_mtime_ns, cached_payload = _CONFIG_CACHE[resolved]
        if cached_mtime_ns == mtime_ns:
            return cached_payload

    try:
        payload = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in config file: {resolved}") from exc

    if not isinstance(payload, dict):
        raise ValueError(f"Config root must be a JSON object: {resolved}")

    _CONFIG_CACHE[resolved] = (mtime_ns, payload)
    return payload


def clear_config_cache() -> None:
    """Clear in-memory config cache."""
    _CONFIG_CACHE.clear()


def get_board_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return normalized `board` settings with defaults filled in."""
    payload = config if config is not None else load_config()
    board = payload.get("board")
    if not isinstance(board, dict):
        board = {}

    tick = board.get("tick_interval_sec")
    store_path = board.get("store_path")
    save_key = board.get("task_save_key")
    display_format = board.get("display_format")
    fake_hour = board.get("fake_hour")
    return {
        "tick_interval_sec": float(tick)
        if isinstance(tick, (int, float)) and not isinstance(tick, bool) and tick > 0
        else DEFAULT_TICK_INTERVAL_SEC,
        "store_path": store_path if isinstance(store_path, str) and store_path.strip() else DEFAULT_STORE_PATH,
        "task_save_key": save_key if isinstance(save_key, str) and save_key.strip() else DEFAULT_TASK_SAVE_KEY,
        "display_format": display_format
        if isinstance(display_format, str) and display_format
        else DEFAULT_DISPLAY_FORMAT,
        "fake_hour": fake_hour
        if isinstance(fake_hour, int) and not isinstance(fake_hour, bool) and 0 <= fake_hour <= 23
        else None,
    }


def get_logging_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = config if config is not None else load_config()
    section = payload.get("logging")
    if not isinstance(section, dict):
        section = {}
    level = section.get("level")
    log_dir = section.get("log_dir")
    return {
        "level": level.upper() if isinstance(level, str) and level.strip() else "INFO",
        "log_dir": log_dir if isinstance(log_dir, str) and log_dir.strip() else None,
    }
