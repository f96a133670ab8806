"""Editable rows behind the tab color grid and their export to a TabColorMap."""
from __future__ import annotations

from typing import Iterator, List, Mapping, Optional, Tuple

from .configuration import EMPTY_TAB_COLORS, TabColorMap
from .tab_colors import TabColor, decode_color, encode_color

_FALLBACK_COLOR = TabColor(0, 0, 0)


def _load_order(tab_text: str) -> Tuple[str, str]:
    # Alphabetical ignoring case; lowercase first when labels differ only by case.
    return tab_text.lower(), tab_text.swapcase()


class TabColorRow:
    """One grid row: a tab label, its color text, and the last color that decoded."""

    def __init__(self, tab_text: str = "", color_text: str = "") -> None:
        self.tab_text = tab_text
        self._color = _FALLBACK_COLOR
        self._color_decoded = False
        self._color_text = ""
        self.color_text = color_text

    @classmethod
    def create(cls, tab_text: str, color: TabColor) -> "TabColorRow":
        row = cls(tab_text)
        row.set_color(color)
        return row

    @classmethod
    def blank(cls) -> "TabColorRow":
        return cls()

    @property
    def color_text(self) -> str:
        return self._color_text

    @color_text.setter
    def color_text(self, text: Optional[str]) -> None:
        self._color_text = text or ""
        result = decode_color(self._color_text)
        if result.ok:
            self._color = result.color
        self._color_decoded = result.ok

    @property
    def color(self) -> TabColor:
        return self._color

    @color.setter
    def color(self, color: TabColor) -> None:
        self.set_color(color)

    def set_color(self, color: TabColor) -> None:
        if not isinstance(color, TabColor):
            raise TypeError(f"expected TabColor, got {color!r}")
        self._color = color
        self._color_text = encode_color(color)
        self._color_decoded = True

    @property
    def is_valid(self) -> bool:
        return bool((self.tab_text or "").strip()) and self._color_decoded

    def to_item(self) -> Tuple[str, TabColor]:
        return self.tab_text, self._color

    def __repr__(self) -> str:
        return f"TabColorRow(tab_text={self.tab_text!r}, color_text={self._color_text!r}, valid={self.is_valid})"


class TabColorTable:
    """Ordered rows of the tab color editor; the grid renders from this list."""

    def __init__(self) -> None:
        self._rows: List[TabColorRow] = []

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[TabColorRow]:
        return iter(self._rows)

    def __getitem__(self, index: int) -> TabColorRow:
        return self._rows[index]

    @property
    def rows(self) -> List[TabColorRow]:
        return list(self._rows)

    def clear(self) -> None:
        self._rows.clear()

    def load_from(self, colors: Mapping[str, TabColor]) -> None:
        self._rows.clear()
        for tab_text in sorted(colors.keys(), key=_load_order):
            self._rows.append(TabColorRow.create(tab_text, colors[tab_text]))

    def add_row(self, tab_text: str = "", color: Optional[TabColor] = None) -> TabColorRow:
        row = TabColorRow.create(tab_text, color) if color is not None else TabColorRow(tab_text)
        self._rows.append(row)
        return row

    def remove_row(self, index: int) -> TabColorRow:
        if not 0 <= index < len(self._rows):
            raise IndexError(f"tab color row {index} out of range (0..{len(self._rows) - 1})")
        return self._rows.pop(index)

    def export_to_map(self) -> TabColorMap:
        """Project valid rows into a map; the first row wins for labels differing only by case."""
        if not self._rows:
            return EMPTY_TAB_COLORS
        return TabColorMap.of([row.to_item() for row in self._rows if row.is_valid])
