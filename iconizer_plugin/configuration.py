"""Immutable Tab Iconizer configuration snapshot and its display modes."""
from __future__ import annotations

import enum
import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .tab_colors import TabColor, decode_color, encode_color

LOGGER = logging.getLogger("TabIconizer.Configuration")

DEFAULT_HORIZONTAL_SPACING = 4.0
DEFAULT_VERTICAL_SPACING = 2.0
DEFAULT_ICON_TEXT_SPACING = 4.0


class IconizerMode(enum.Enum):
    DEFAULT = "default"
    ICON_ONLY = "icon_only"
    ICON_AND_TEXT = "icon_and_text"
    TEXT_ONLY = "text_only"

    @property
    def shows_icon(self) -> bool:
        return MODE_CAPABILITIES[self].shows_icon

    @property
    def shows_text(self) -> bool:
        return MODE_CAPABILITIES[self].shows_text

    @property
    def display_text(self) -> str:
        return _MODE_DISPLAY_TEXT[self]


@dataclass(frozen=True)
class ModeCapabilities:
    shows_icon: bool
    shows_text: bool


MODE_CAPABILITIES: Mapping[IconizerMode, ModeCapabilities] = {
    IconizerMode.DEFAULT: ModeCapabilities(shows_icon=False, shows_text=True),
    IconizerMode.ICON_ONLY: ModeCapabilities(shows_icon=True, shows_text=False),
    IconizerMode.ICON_AND_TEXT: ModeCapabilities(shows_icon=True, shows_text=True),
    IconizerMode.TEXT_ONLY: ModeCapabilities(shows_icon=False, shows_text=True),
}

_MODE_DISPLAY_TEXT: Mapping[IconizerMode, str] = {
    IconizerMode.DEFAULT: "Default (no icons)",
    IconizerMode.ICON_ONLY: "Icons only",
    IconizerMode.ICON_AND_TEXT: "Icons and text",
    IconizerMode.TEXT_ONLY: "Text only",
}

MODE_CHOICES: Tuple[Tuple[IconizerMode, str], ...] = tuple((mode, mode.display_text) for mode in IconizerMode)


def mode_from_display_text(text: str) -> Optional[IconizerMode]:
    for mode, display in MODE_CHOICES:
        if display == text:
            return mode
    return None


def _fold(key: str) -> str:
    return key.lower()


class TabColorMap(Mapping[str, TabColor]):
    """Read-only tab label to color map with case-insensitive keys.

    The first spelling of a label wins when the input repeats it with a different case.
    """

    __slots__ = ("_entries",)

    def __init__(self, items: Iterable[Tuple[str, TabColor]] | Mapping[str, TabColor] = ()) -> None:
        if isinstance(items, Mapping):
            items = items.items()
        entries: Dict[str, Tuple[str, TabColor]] = {}
        for key, color in items:
            if not isinstance(key, str):
                raise TypeError(f"tab color keys must be strings, got {key!r}")
            if not isinstance(color, TabColor):
                raise TypeError(f"tab color values must be TabColor, got {color!r}")
            entries.setdefault(_fold(key), (key, color))
        self._entries = entries

    @classmethod
    def of(cls, source: Iterable[Tuple[str, TabColor]] | Mapping[str, TabColor] | None) -> "TabColorMap":
        if isinstance(source, TabColorMap):
            return source
        if not source:
            return EMPTY_TAB_COLORS
        built = cls(source)
        return built if built else EMPTY_TAB_COLORS

    def __getitem__(self, key: str) -> TabColor:
        if not isinstance(key, str):
            raise KeyError(key)
        try:
            return self._entries[_fold(key)][1]
        except KeyError:
            raise KeyError(key) from None

    def __iter__(self) -> Iterator[str]:
        return (label for label, _color in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __hash__(self) -> int:
        return hash(frozenset((folded, color) for folded, (_key, color) in self._entries.items()))

    def __repr__(self) -> str:
        body = ", ".join(f"{key!r}: {encode_color(color)}" for key, color in self.items())
        return f"TabColorMap({{{body}}})"


EMPTY_TAB_COLORS = TabColorMap()


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in {"1", "true", "yes", "on"}:
            return True
        if token in {"0", "false", "no", "off"}:
            return False
    return default


def _coerce_float(value: Any, default: float, *, minimum: Optional[float] = None) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        numeric = default
    if not math.isfinite(numeric):
        numeric = default
    if minimum is not None:
        numeric = max(minimum, numeric)
    return numeric


def _coerce_mode(value: Any, default: IconizerMode) -> IconizerMode:
    if isinstance(value, IconizerMode):
        return value
    if not isinstance(value, str):
        return default
    token = value.strip()
    try:
        return IconizerMode(token.lower())
    except ValueError:
        pass
    try:
        return IconizerMode[token.upper()]
    except KeyError:
        pass
    return mode_from_display_text(token) or default


def _coerce_tab_colors(value: Any, *, errors: Optional[List[str]] = None) -> TabColorMap:
    """Parse tab color overrides from a mapping or a JSON object string.

    Entries with blank labels or undecodable colors are skipped.
    """

    def _record(message: str) -> None:
        if errors is not None:
            errors.append(message)

    if isinstance(value, str):
        try:
            value = json.loads(value) if value.strip() else {}
        except json.JSONDecodeError:
            _record("Ignoring tab colors: not a JSON object")
            return EMPTY_TAB_COLORS
    if not isinstance(value, Mapping):
        return EMPTY_TAB_COLORS
    items: List[Tuple[str, TabColor]] = []
    for raw_label, raw_color in value.items():
        label = str(raw_label).strip() if raw_label is not None else ""
        if not label:
            _record("Skipping tab color with empty label")
            continue
        if isinstance(raw_color, TabColor):
            items.append((label, raw_color))
            continue
        result = decode_color(raw_color)
        if not result.ok:
            _record(f"Skipping tab color for {label}: {result.error.reason}")
            continue
        items.append((label, result.color))
    return TabColorMap.of(items)


@dataclass(frozen=True)
class IconizerConfiguration:
    """Snapshot of every Tab Iconizer option."""

    mode: IconizerMode = IconizerMode.DEFAULT
    horizontal_spacing: float = DEFAULT_HORIZONTAL_SPACING
    vertical_spacing: float = DEFAULT_VERTICAL_SPACING
    icon_text_spacing: float = DEFAULT_ICON_TEXT_SPACING
    rotate_vertical_tab_icons: bool = True
    use_tab_colors: bool = False
    tab_colors: TabColorMap = field(default=EMPTY_TAB_COLORS)

    def __post_init__(self) -> None:
        if not isinstance(self.mode, IconizerMode):
            raise TypeError(f"mode must be an IconizerMode, got {self.mode!r}")
        for name in ("horizontal_spacing", "vertical_spacing", "icon_text_spacing"):
            raw = getattr(self, name)
            numeric = float(raw)
            if not math.isfinite(numeric) or numeric < 0:
                raise ValueError(f"{name} must be a non-negative number, got {raw!r}")
            object.__setattr__(self, name, numeric)
        object.__setattr__(self, "rotate_vertical_tab_icons", bool(self.rotate_vertical_tab_icons))
        object.__setattr__(self, "use_tab_colors", bool(self.use_tab_colors))
        object.__setattr__(self, "tab_colors", TabColorMap.of(self.tab_colors))

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "IconizerConfiguration":
        """Build a configuration from raw host values, falling back to defaults per field."""
        base = cls()
        if not data:
            return base
        errors: List[str] = []
        configuration = cls(
            mode=_coerce_mode(data.get("mode"), base.mode),
            horizontal_spacing=_coerce_float(data.get("horizontal_spacing"), base.horizontal_spacing, minimum=0.0),
            vertical_spacing=_coerce_float(data.get("vertical_spacing"), base.vertical_spacing, minimum=0.0),
            icon_text_spacing=_coerce_float(data.get("icon_text_spacing"), base.icon_text_spacing, minimum=0.0),
            rotate_vertical_tab_icons=_coerce_bool(
                data.get("rotate_vertical_tab_icons"),
                base.rotate_vertical_tab_icons,
            ),
            use_tab_colors=_coerce_bool(data.get("use_tab_colors"), base.use_tab_colors),
            tab_colors=_coerce_tab_colors(data.get("tab_colors"), errors=errors),
        )
        for message in errors:
            LOGGER.debug(message)
        return configuration

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "horizontal_spacing": float(self.horizontal_spacing),
            "vertical_spacing": float(self.vertical_spacing),
            "icon_text_spacing": float(self.icon_text_spacing),
            "rotate_vertical_tab_icons": bool(self.rotate_vertical_tab_icons),
            "use_tab_colors": bool(self.use_tab_colors),
            "tab_colors": {label: encode_color(color) for label, color in self.tab_colors.items()},
        }
