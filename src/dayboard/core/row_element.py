"""Server-side visual element for one board row."""

from __future__ import annotations

from typing import Any


class RowElement:
    """Holds what the page renders for a row: markers, disabled flag, text."""

    def __init__(self, *, element_id: str, save_trigger_id: str, text: str = "") -> None:
        self.element_id = element_id
        self.save_trigger_id = save_trigger_id
        self.disabled = False
        self._markers: list[str] = []
        self._text = text

    @property
    def markers(self) -> list[str]:
        return list(self._markers)

    def has_marker(self, name: str) -> bool:
        return name in self._markers

    def add_marker(self, name: str) -> None:
        if name not in self._markers:
            self._markers.append(name)

    def remove_marker(self, name: str) -> None:
        if name in self._markers:
            self._markers.remove(name)

    def set_disabled(self, disabled: bool) -> None:
        self.disabled = bool(disabled)

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = str(text)

    def to_dict(self) -> dict[str, Any]:
        return {
            "element_id": self.element_id,
            "save_id": self.save_trigger_id,
            "markers": self.markers,
            "disabled": self.disabled,
            "text": self._text,
        }
