"""Row visibility rules for the options form."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Tuple

from .configuration import MODE_CAPABILITIES, IconizerMode

LAYOUT_ROW_HEIGHT = 27.0


class LayoutRow(enum.Enum):
    MODE = "mode"
    HORIZONTAL_MARGIN = "horizontal_margin"
    VERTICAL_MARGIN = "vertical_margin"
    ICON_TEXT_SPACING = "icon_text_spacing"
    ROTATE_ICONS = "rotate_icons"
    TAB_COLORS_CHECK = "tab_colors_check"
    TAB_COLORS_EDITOR = "tab_colors_editor"


class RowSize(enum.Enum):
    COLLAPSED = "collapsed"
    SHOWN = "shown"
    AUTO = "auto"


@dataclass(frozen=True)
class LayoutDecision:
    mode: IconizerMode
    use_tab_colors: bool
    sizes: Tuple[Tuple[LayoutRow, RowSize], ...]

    def size(self, row: LayoutRow) -> RowSize:
        for candidate, size in self.sizes:
            if candidate is row:
                return size
        raise KeyError(row)

    def is_visible(self, row: LayoutRow) -> bool:
        return self.size(row) is not RowSize.COLLAPSED

    def height(self, row: LayoutRow, row_height: float = LAYOUT_ROW_HEIGHT) -> Optional[float]:
        """Fixed height for a row, or None when the row grows to its content."""
        size = self.size(row)
        if size is RowSize.AUTO:
            return None
        return row_height if size is RowSize.SHOWN else 0.0

    def as_dict(self) -> Mapping[LayoutRow, RowSize]:
        return dict(self.sizes)

    def __iter__(self) -> Iterator[Tuple[LayoutRow, RowSize]]:
        return iter(self.sizes)


def _shown_if(condition: bool) -> RowSize:
    return RowSize.SHOWN if condition else RowSize.COLLAPSED


def compute_layout(mode: IconizerMode, use_tab_colors: bool) -> LayoutDecision:
    use_tab_colors = bool(use_tab_colors)
    if mode is IconizerMode.DEFAULT:
        # Decoration is off: only the mode selector stays.
        sizes = tuple(
            (row, RowSize.SHOWN if row is LayoutRow.MODE else RowSize.COLLAPSED) for row in LayoutRow
        )
        return LayoutDecision(mode=mode, use_tab_colors=use_tab_colors, sizes=sizes)

    capabilities = MODE_CAPABILITIES[mode]
    sizes = (
        (LayoutRow.MODE, RowSize.SHOWN),
        (LayoutRow.HORIZONTAL_MARGIN, RowSize.SHOWN),
        (LayoutRow.VERTICAL_MARGIN, RowSize.SHOWN),
        (LayoutRow.ICON_TEXT_SPACING, _shown_if(mode is IconizerMode.ICON_AND_TEXT)),
        (LayoutRow.ROTATE_ICONS, _shown_if(capabilities.shows_icon)),
        (LayoutRow.TAB_COLORS_CHECK, RowSize.SHOWN),
        (LayoutRow.TAB_COLORS_EDITOR, RowSize.AUTO if use_tab_colors else RowSize.COLLAPSED),
    )
    return LayoutDecision(mode=mode, use_tab_colors=use_tab_colors, sizes=sizes)


def control_visible(decision: LayoutDecision, row: LayoutRow) -> bool:
    """A control is displayed exactly when the row holding it is not collapsed."""
    return decision.is_visible(row)
