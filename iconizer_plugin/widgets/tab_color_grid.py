from __future__ import annotations

import logging
import tkinter as tk
from tkinter import colorchooser
from typing import Callable, Dict, List, Optional

from PyQt6.QtGui import QColor

from ..tab_color_table import TabColorRow, TabColorTable
from ..tab_colors import decode_color, from_qcolor, to_qcolor, to_tk_color, with_rgb

LOGGER = logging.getLogger("TabIconizer.TabColorGrid")

INVALID_ENTRY_BACKGROUND = "#ffdddd"
VALID_ENTRY_BACKGROUND = "white"

IndexCallback = Callable[[int], None]
TextCallback = Callable[[int, str], None]


def swatch_style(row: TabColorRow, default_background: str) -> Dict[str, str]:
    """Button options for a row swatch: filled with the color, or the stock look when invalid."""
    if row.is_valid:
        fill = to_tk_color(row.color)
        return {"relief": "flat", "background": fill, "activebackground": fill}
    return {"relief": "raised", "background": default_background, "activebackground": default_background}


def make_color_picker(parent: tk.Misc, *, title: str = "Tab color") -> Callable[[QColor], Optional[QColor]]:
    """Modal picker on top of Tk's color dialog; alpha of the initial color is kept."""

    def _pick(initial: QColor) -> Optional[QColor]:
        base = from_qcolor(initial) if initial.isValid() else from_qcolor(QColor(0, 0, 0))
        rgb, _hex = colorchooser.askcolor(color=to_tk_color(base), parent=parent, title=title)
        if rgb is None:
            return None
        return to_qcolor(with_rgb(base, rgb))

    return _pick


class _GridRow:
    def __init__(self, label_entry: tk.Entry, color_entry: tk.Entry, swatch: tk.Button, remove: tk.Button) -> None:
        self.label_entry = label_entry
        self.color_entry = color_entry
        self.swatch = swatch
        self.remove = remove

    def widgets(self) -> List[tk.Widget]:
        return [self.label_entry, self.color_entry, self.swatch, self.remove]


class TabColorGridWidget(tk.Frame):
    """Tab label / color text / swatch grid rendered from a TabColorTable."""

    def __init__(self, parent) -> None:
        super().__init__(parent, bd=0, highlightthickness=0)
        self._tab_text_callback: Optional[TextCallback] = None
        self._color_text_callback: Optional[TextCallback] = None
        self._pick_callback: Optional[IndexCallback] = None
        self._remove_callback: Optional[IndexCallback] = None
        self._add_callback: Optional[Callable[[], None]] = None
        self._rows: List[_GridRow] = []

        header_label = tk.Label(self, text="Tab text", anchor="w")
        header_label.grid(row=0, column=0, sticky="w", padx=(0, 4))
        header_color = tk.Label(self, text="Color", anchor="w")
        header_color.grid(row=0, column=1, sticky="w", padx=(0, 4))
        self.columnconfigure(0, weight=1)

        self._body = tk.Frame(self, bd=0, highlightthickness=0)
        self._body.grid(row=1, column=0, columnspan=4, sticky="we")
        self._body.columnconfigure(0, weight=1)

        add_btn = tk.Button(self, text="Add", width=6, command=self._handle_add)
        add_btn.grid(row=2, column=0, sticky="w", pady=(4, 0))
        self._add_btn = add_btn
        self._default_background = add_btn.cget("background")

    def set_callbacks(
        self,
        *,
        on_tab_text: Optional[TextCallback] = None,
        on_color_text: Optional[TextCallback] = None,
        on_pick: Optional[IndexCallback] = None,
        on_remove: Optional[IndexCallback] = None,
        on_add: Optional[Callable[[], None]] = None,
    ) -> None:
        self._tab_text_callback = on_tab_text
        self._color_text_callback = on_color_text
        self._pick_callback = on_pick
        self._remove_callback = on_remove
        self._add_callback = on_add

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def render(self, table: TabColorTable) -> None:
        if len(self._rows) != len(table):
            self._rebuild(len(table))
        for grid_row, row in zip(self._rows, table):
            self._sync_entry(grid_row.label_entry, row.tab_text)
            self._sync_entry(grid_row.color_entry, row.color_text)
            grid_row.color_entry.configure(
                background=VALID_ENTRY_BACKGROUND if decode_color(row.color_text).ok else INVALID_ENTRY_BACKGROUND
            )
            grid_row.swatch.configure(**swatch_style(row, self._default_background))

    def _rebuild(self, count: int) -> None:
        for grid_row in self._rows:
            for widget in grid_row.widgets():
                widget.destroy()
        self._rows = []
        for index in range(count):
            label_entry = tk.Entry(self._body, width=24)
            label_entry.grid(row=index, column=0, sticky="we", padx=(0, 4), pady=1)
            label_entry.bind("<FocusOut>", lambda e, i=index: self._commit_tab_text(i, e.widget))
            label_entry.bind("<Return>", lambda e, i=index: self._commit_tab_text(i, e.widget))
            color_entry = tk.Entry(self._body, width=12)
            color_entry.grid(row=index, column=1, sticky="w", padx=(0, 4), pady=1)
            color_entry.bind("<FocusOut>", lambda e, i=index: self._commit_color_text(i, e.widget))
            color_entry.bind("<Return>", lambda e, i=index: self._commit_color_text(i, e.widget))
            color_entry.bind("<KeyRelease>", lambda _e, i=index: self._validate_color(i, lazy=True))
            swatch = tk.Button(self._body, width=3, command=lambda i=index: self._handle_pick(i))
            swatch.grid(row=index, column=2, padx=(0, 4), pady=1)
            remove = tk.Button(self._body, text="Remove", command=lambda i=index: self._handle_remove(i))
            remove.grid(row=index, column=3, pady=1)
            self._rows.append(_GridRow(label_entry, color_entry, swatch, remove))

    @staticmethod
    def _sync_entry(entry: tk.Entry, text: str) -> None:
        if entry.get() == text:
            return
        entry.delete(0, tk.END)
        entry.insert(0, text)

    def _validate_color(self, index: int, *, lazy: bool = False) -> bool:
        if index >= len(self._rows):
            return False
        entry = self._rows[index].color_entry
        raw = entry.get().strip()
        valid = decode_color(raw).ok
        if valid or not raw:
            entry.configure(background=VALID_ENTRY_BACKGROUND)
        elif not lazy:
            entry.configure(background=INVALID_ENTRY_BACKGROUND)
        return valid

    def _owns(self, index: int, widget: object, attr: str) -> bool:
        # Stale events from destroyed rows carry an old index.
        return index < len(self._rows) and (widget is None or getattr(self._rows[index], attr) is widget)

    def _commit_tab_text(self, index: int, widget: object = None) -> None:
        if self._tab_text_callback is None or not self._owns(index, widget, "label_entry"):
            return
        self._tab_text_callback(index, self._rows[index].label_entry.get())

    def _commit_color_text(self, index: int, widget: object = None) -> None:
        if self._color_text_callback is None or not self._owns(index, widget, "color_entry"):
            return
        self._validate_color(index)
        self._color_text_callback(index, self._rows[index].color_entry.get())

    def _handle_pick(self, index: int) -> None:
        if self._pick_callback is None:
            return
        try:
            self._pick_callback(index)
        except tk.TclError:
            LOGGER.debug("Color picker failed for row %d", index, exc_info=True)

    def _handle_remove(self, index: int) -> None:
        if self._remove_callback is not None:
            self._remove_callback(index)

    def _handle_add(self) -> None:
        if self._add_callback is not None:
            self._add_callback()
