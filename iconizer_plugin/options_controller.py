"""Keeps the options form and the IconizerConfiguration snapshot in sync."""
from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Protocol

from PyQt6.QtGui import QColor

from .configuration import (
    DEFAULT_HORIZONTAL_SPACING,
    DEFAULT_ICON_TEXT_SPACING,
    DEFAULT_VERTICAL_SPACING,
    IconizerConfiguration,
    IconizerMode,
)
from .layout_rules import LayoutDecision, compute_layout
from .tab_color_table import TabColorTable
from .tab_colors import from_qcolor, to_qcolor

LOGGER = logging.getLogger("TabIconizer.Options")

ColorPicker = Callable[[QColor], Optional[QColor]]


class OptionsControllerError(Exception):
    """Base class for options controller failures."""


class AlreadyInitializedError(OptionsControllerError, RuntimeError):
    """Raised when initialize() is called on an initialized controller."""


class InvalidArgumentError(OptionsControllerError, ValueError):
    """Raised when a required host or configuration is missing."""


@dataclass(frozen=True)
class OptionFields:
    """Scalar field values shown by the options form."""

    mode: IconizerMode = IconizerMode.DEFAULT
    horizontal_spacing: float = DEFAULT_HORIZONTAL_SPACING
    vertical_spacing: float = DEFAULT_VERTICAL_SPACING
    icon_text_spacing: float = DEFAULT_ICON_TEXT_SPACING
    rotate_vertical_tab_icons: bool = True
    use_tab_colors: bool = False

    @classmethod
    def from_configuration(cls, configuration: IconizerConfiguration) -> "OptionFields":
        return cls(
            mode=configuration.mode,
            horizontal_spacing=configuration.horizontal_spacing,
            vertical_spacing=configuration.vertical_spacing,
            icon_text_spacing=configuration.icon_text_spacing,
            rotate_vertical_tab_icons=configuration.rotate_vertical_tab_icons,
            use_tab_colors=configuration.use_tab_colors,
        )


class OptionsHost(Protocol):
    def apply(self, configuration: IconizerConfiguration) -> None: ...


class OptionsView(Protocol):
    def set_change_callback(self, callback: Callable[..., None]) -> None: ...

    def read_fields(self) -> OptionFields: ...

    def write_fields(self, fields: OptionFields) -> None: ...

    def apply_layout(self, decision: LayoutDecision) -> None: ...

    def render_tab_colors(self, table: TabColorTable) -> None: ...

    def show_status(self, message: str) -> None: ...


def _non_negative(value: Any) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(numeric) or numeric < 0:
        return 0.0
    return numeric


class OptionsController:
    """Loads configurations into the view and pushes user edits to the host.

    Programmatic loads run under a suppression guard so the change notifications
    they trigger never reach the host.
    """

    def __init__(self, view: OptionsView, *, color_picker: Optional[ColorPicker] = None) -> None:
        self._view = view
        self._color_picker = color_picker
        self._host: Optional[OptionsHost] = None
        self._table = TabColorTable()
        self._suppress_depth = 0
        self._layout: Optional[LayoutDecision] = None
        with self._suppress_user_change():
            view.set_change_callback(self.on_user_change)
            self._update_layout(view.read_fields())

    # Lifecycle -------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._host is not None

    @property
    def tab_colors(self) -> TabColorTable:
        return self._table

    @property
    def layout(self) -> Optional[LayoutDecision]:
        return self._layout

    @property
    def loading(self) -> bool:
        return self._suppress_depth > 0

    def initialize(self, host: OptionsHost, configuration: IconizerConfiguration) -> None:
        if self._host is not None:
            raise AlreadyInitializedError("Options controller is already initialized.")
        if host is None:
            raise InvalidArgumentError("host is required")
        if configuration is None:
            raise InvalidArgumentError("configuration is required")
        self._host = host
        try:
            self.load_from_configuration(configuration)
        except Exception:
            self._host = None
            raise

    def load_from_configuration(self, configuration: IconizerConfiguration) -> None:
        if configuration is None:
            raise InvalidArgumentError("configuration is required")
        LOGGER.debug(
            "Loading options: mode=%s use_tab_colors=%s tab_colors=%d",
            configuration.mode.value,
            configuration.use_tab_colors,
            len(configuration.tab_colors),
        )
        with self._suppress_user_change():
            fields = OptionFields.from_configuration(configuration)
            self._view.write_fields(fields)
            self._update_layout(fields)
            self._table.load_from(configuration.tab_colors)
            self._view.render_tab_colors(self._table)

    @contextmanager
    def _suppress_user_change(self) -> Iterator[None]:
        self._suppress_depth += 1
        try:
            yield
        finally:
            self._suppress_depth -= 1

    # Snapshot --------------------------------------------------------------

    def build_configuration(self) -> IconizerConfiguration:
        fields = self._view.read_fields()
        return IconizerConfiguration(
            mode=fields.mode,
            horizontal_spacing=_non_negative(fields.horizontal_spacing),
            vertical_spacing=_non_negative(fields.vertical_spacing),
            icon_text_spacing=_non_negative(fields.icon_text_spacing),
            rotate_vertical_tab_icons=fields.rotate_vertical_tab_icons,
            use_tab_colors=fields.use_tab_colors,
            tab_colors=self._table.export_to_map(),
        )

    def on_user_change(self, *_args: Any) -> None:
        if self._suppress_depth > 0:
            return
        fields = self._view.read_fields()
        self._update_layout(fields)
        if self._host is None:
            LOGGER.debug("Options changed before initialization; not applying")
            return
        configuration = self.build_configuration()
        try:
            self._host.apply(configuration)
        except Exception as exc:
            LOGGER.warning("Host rejected options update: %s", exc, exc_info=True)
            self._view.show_status(f"Failed to apply options: {exc}")

    def _update_layout(self, fields: OptionFields) -> None:
        decision = compute_layout(fields.mode, fields.use_tab_colors)
        self._layout = decision
        self._view.apply_layout(decision)

    # Grid edits ------------------------------------------------------------

    def add_tab_color_row(self) -> int:
        self._table.add_row()
        self._view.render_tab_colors(self._table)
        return len(self._table) - 1

    def remove_tab_color_row(self, index: int) -> None:
        self._table.remove_row(index)
        self._view.render_tab_colors(self._table)
        self.on_user_change()

    def edit_tab_text(self, index: int, text: str) -> None:
        row = self._table[index]
        if row.tab_text == text:
            return
        row.tab_text = text
        # Row validity depends on the label.
        self._view.render_tab_colors(self._table)
        self.on_user_change()

    def edit_color_text(self, index: int, text: str) -> None:
        row = self._table[index]
        if row.color_text == text:
            return
        row.color_text = text
        self._view.render_tab_colors(self._table)
        self.on_user_change()

    def pick_row_color(self, index: int) -> bool:
        """Open the color picker for a row; returns True when a color was applied."""
        if self._color_picker is None:
            LOGGER.debug("No color picker available for tab color row %d", index)
            return False
        row = self._table[index]
        picked = self._color_picker(to_qcolor(row.color))
        if picked is None or not picked.isValid():
            return False
        row.set_color(from_qcolor(picked))
        self._view.render_tab_colors(self._table)
        self.on_user_change()
        return True
