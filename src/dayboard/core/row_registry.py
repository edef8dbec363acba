"""Lookup from a row's save-trigger id to its metadata."""

from __future__ import annotations

from collections.abc import Iterator

from .row_state import RowMetadata


class RowRegistry:
    def __init__(self) -> None:
        self._rows: dict[str, RowMetadata] = {}

    def register(self, save_id: str, row: RowMetadata) -> None:
        if save_id in self._rows:
            raise ValueError(f"Save trigger '{save_id}' is already registered.")
        self._rows[save_id] = row

    def get(self, save_id: str) -> RowMetadata | None:
        return self._rows.get(save_id)

    def rows(self) -> Iterator[RowMetadata]:
        """Rows in registration order."""
        return iter(list(self._rows.values()))

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, save_id: object) -> bool:
        return save_id in self._rows
