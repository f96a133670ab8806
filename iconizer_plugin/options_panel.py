"""Tk options page for Tab Iconizer."""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from .configuration import MODE_CHOICES, IconizerConfiguration, IconizerMode, mode_from_display_text
from .layout_rules import LayoutDecision, LayoutRow, control_visible
from .options_controller import OptionFields, OptionsController, OptionsHost
from .tab_color_table import TabColorTable

LOGGER = logging.getLogger("TabIconizer.OptionsPanel")

SPACING_MAX = 100.0
SPACING_INCREMENT = 0.5
ROW_PAD = (6, 0)

# Grid row of each logical row; only this panel knows the integer positions.
ROW_INDEX: Dict[LayoutRow, int] = {
    LayoutRow.MODE: 0,
    LayoutRow.HORIZONTAL_MARGIN: 1,
    LayoutRow.VERTICAL_MARGIN: 2,
    LayoutRow.ICON_TEXT_SPACING: 3,
    LayoutRow.ROTATE_ICONS: 4,
    LayoutRow.TAB_COLORS_CHECK: 5,
    LayoutRow.TAB_COLORS_EDITOR: 6,
}
STATUS_ROW_INDEX = 7


def _parse_spacing(value: Any, fallback: float) -> float:
    try:
        numeric = float(str(value).strip().replace(",", "."))
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(numeric):
        return fallback
    return max(0.0, numeric)


def _format_spacing(value: float) -> str:
    return f"{float(value):g}"


class OptionsPanel:
    """Form with one grid row per option; renders whatever the controller decides."""

    def __init__(self, parent) -> None:
        import tkinter as tk
        from tkinter import ttk

        from .widgets import TabColorGridWidget

        try:
            import myNotebook as nb  # type: ignore
        except ImportError:  # pragma: no cover - running outside the host
            nb = None

        self._change_callback: Optional[Callable[..., None]] = None
        self._controls: List[Tuple[Any, LayoutRow]] = []
        self._last_fields = OptionFields()

        self._var_mode = tk.StringVar(value=IconizerMode.DEFAULT.display_text)
        self._var_horizontal = tk.StringVar(value=_format_spacing(self._last_fields.horizontal_spacing))
        self._var_vertical = tk.StringVar(value=_format_spacing(self._last_fields.vertical_spacing))
        self._var_icon_text = tk.StringVar(value=_format_spacing(self._last_fields.icon_text_spacing))
        self._var_rotate = tk.BooleanVar(value=self._last_fields.rotate_vertical_tab_icons)
        self._var_use_tab_colors = tk.BooleanVar(value=self._last_fields.use_tab_colors)
        self._status_var = tk.StringVar(value="")

        frame = nb.Frame(parent) if nb is not None else ttk.Frame(parent)
        frame.columnconfigure(1, weight=1)
        self._frame = frame

        mode_label = ttk.Label(frame, text="Mode")
        mode_combo = ttk.Combobox(
            frame,
            textvariable=self._var_mode,
            values=[display for _mode, display in MODE_CHOICES],
            state="readonly",
            width=20,
        )
        self._place(mode_label, LayoutRow.MODE, column=0, sticky="w")
        self._place(mode_combo, LayoutRow.MODE, column=1, sticky="w")

        spin_rows = (
            (LayoutRow.HORIZONTAL_MARGIN, "Horizontal margin", self._var_horizontal),
            (LayoutRow.VERTICAL_MARGIN, "Vertical margin", self._var_vertical),
            (LayoutRow.ICON_TEXT_SPACING, "Icon/text spacing", self._var_icon_text),
        )
        for layout_row, text, variable in spin_rows:
            label = ttk.Label(frame, text=text)
            spin = ttk.Spinbox(
                frame,
                from_=0.0,
                to=SPACING_MAX,
                increment=SPACING_INCREMENT,
                textvariable=variable,
                width=8,
            )
            self._place(label, layout_row, column=0, sticky="w")
            self._place(spin, layout_row, column=1, sticky="w")

        rotate_check = ttk.Checkbutton(
            frame,
            text="Rotate icons on vertical tabs",
            variable=self._var_rotate,
            onvalue=True,
            offvalue=False,
        )
        self._place(rotate_check, LayoutRow.ROTATE_ICONS, column=0, columnspan=2, sticky="w")

        tab_colors_check = ttk.Checkbutton(
            frame,
            text="Use tab colors",
            variable=self._var_use_tab_colors,
            onvalue=True,
            offvalue=False,
        )
        self._place(tab_colors_check, LayoutRow.TAB_COLORS_CHECK, column=0, columnspan=2, sticky="w")

        grid = TabColorGridWidget(frame)
        self._place(grid, LayoutRow.TAB_COLORS_EDITOR, column=0, columnspan=2, sticky="nsew")
        self._grid = grid

        status_label = ttk.Label(frame, textvariable=self._status_var, foreground="#c62828")
        status_label.grid(row=STATUS_ROW_INDEX, column=0, columnspan=2, sticky="w", pady=ROW_PAD)

        for variable in (
            self._var_mode,
            self._var_horizontal,
            self._var_vertical,
            self._var_icon_text,
            self._var_rotate,
            self._var_use_tab_colors,
        ):
            variable.trace_add("write", self._on_variable_write)

    def _place(self, widget, layout_row: LayoutRow, **grid_options: Any) -> None:
        widget.grid(row=ROW_INDEX[layout_row], pady=ROW_PAD, padx=(0, 6), **grid_options)
        self._controls.append((widget, layout_row))

    @property
    def frame(self):  # pragma: no cover - Tk integration
        return self._frame

    @property
    def grid(self):
        return self._grid

    # View surface used by OptionsController ----------------------------------

    def set_change_callback(self, callback: Optional[Callable[..., None]]) -> None:
        self._change_callback = callback

    def _on_variable_write(self, *_args: Any) -> None:
        if self._change_callback is not None:
            self._change_callback()

    def read_fields(self) -> OptionFields:
        last = self._last_fields
        mode = mode_from_display_text(self._var_mode.get()) or last.mode
        fields = OptionFields(
            mode=mode,
            horizontal_spacing=_parse_spacing(self._var_horizontal.get(), last.horizontal_spacing),
            vertical_spacing=_parse_spacing(self._var_vertical.get(), last.vertical_spacing),
            icon_text_spacing=_parse_spacing(self._var_icon_text.get(), last.icon_text_spacing),
            rotate_vertical_tab_icons=self._read_bool(self._var_rotate, last.rotate_vertical_tab_icons),
            use_tab_colors=self._read_bool(self._var_use_tab_colors, last.use_tab_colors),
        )
        self._last_fields = fields
        return fields

    @staticmethod
    def _read_bool(variable, fallback: bool) -> bool:
        import tkinter as tk

        try:
            return bool(variable.get())
        except tk.TclError:
            return fallback

    def write_fields(self, fields: OptionFields) -> None:
        self._last_fields = fields
        self._var_mode.set(fields.mode.display_text)
        self._var_horizontal.set(_format_spacing(fields.horizontal_spacing))
        self._var_vertical.set(_format_spacing(fields.vertical_spacing))
        self._var_icon_text.set(_format_spacing(fields.icon_text_spacing))
        self._var_rotate.set(bool(fields.rotate_vertical_tab_icons))
        self._var_use_tab_colors.set(bool(fields.use_tab_colors))

    def apply_layout(self, decision: LayoutDecision) -> None:
        for layout_row, index in ROW_INDEX.items():
            height = decision.height(layout_row)
            self._frame.rowconfigure(index, minsize=int(height or 0))
        for widget, layout_row in self._controls:
            if control_visible(decision, layout_row):
                widget.grid()
            else:
                widget.grid_remove()

    def render_tab_colors(self, table: TabColorTable) -> None:
        self._grid.render(table)

    def show_status(self, message: str) -> None:
        self._status_var.set(message)

    def visible_rows(self) -> List[LayoutRow]:
        shown = [layout_row for widget, layout_row in self._controls if widget.winfo_manager() == "grid"]
        return list(dict.fromkeys(shown))


def create_options_panel(
    parent,
    host: OptionsHost,
    configuration: IconizerConfiguration,
) -> Tuple[OptionsPanel, OptionsController]:
    """Build the Tk form, wire it to a controller and load ``configuration``."""
    from .widgets import make_color_picker

    panel = OptionsPanel(parent)
    controller = OptionsController(panel, color_picker=make_color_picker(panel.frame))
    panel.grid.set_callbacks(
        on_tab_text=controller.edit_tab_text,
        on_color_text=controller.edit_color_text,
        on_pick=controller.pick_row_color,
        on_remove=controller.remove_tab_color_row,
        on_add=controller.add_tab_color_row,
    )
    controller.initialize(host, configuration)
    LOGGER.debug("Options panel created for mode=%s", configuration.mode.value)
    return panel, controller
