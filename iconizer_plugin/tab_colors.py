"""Tab color value type and the text/QColor codecs used by the options panel."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from PyQt6.QtGui import QColor

_HEX_DIGITS = set("0123456789ABCDEFabcdef")
_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class TabColor:
    """8-bit RGBA color assigned to a tab label."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def __post_init__(self) -> None:
        channels = (self.red, self.green, self.blue, self.alpha)
        for value in channels:
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"color channels must be integers in 0..255, got {channels!r}")

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.red, self.green, self.blue


@dataclass(frozen=True)
class InvalidColorFormat:
    text: str
    reason: str


@dataclass(frozen=True)
class ColorDecodeResult:
    color: Optional[TabColor] = None
    error: Optional[InvalidColorFormat] = None

    @property
    def ok(self) -> bool:
        return self.color is not None


def _failure(text: str, reason: str) -> ColorDecodeResult:
    return ColorDecodeResult(error=InvalidColorFormat(text=text, reason=reason))


def _expand_short_hex(hex_part: str) -> str:
    return "".join(ch * 2 for ch in hex_part)


def _decode_hex(hex_part: str) -> Optional[TabColor]:
    if not hex_part or not all(ch in _HEX_DIGITS for ch in hex_part):
        return None
    if len(hex_part) in (3, 4):
        hex_part = _expand_short_hex(hex_part)
    if len(hex_part) == 6:
        hex_part = "FF" + hex_part
    if len(hex_part) != 8:
        return None
    alpha = int(hex_part[0:2], 16)
    red = int(hex_part[2:4], 16)
    green = int(hex_part[4:6], 16)
    blue = int(hex_part[6:8], 16)
    return TabColor(red, green, blue, alpha)


def decode_color(text: Any) -> ColorDecodeResult:
    """Decode ``#AARRGGBB``/``#RRGGBB``/``#ARGB``/``#RGB`` or a color name.

    Never raises; malformed input yields a result carrying ``InvalidColorFormat``.
    """
    if not isinstance(text, str):
        return _failure(repr(text), "color text must be a string")
    token = text.strip()
    if not token:
        return _failure(text, "color text is empty")
    if token.startswith("#"):
        color = _decode_hex(token[1:])
        if color is None:
            return _failure(text, "expected #RGB, #ARGB, #RRGGBB or #AARRGGBB")
        return ColorDecodeResult(color=color)
    if len(token) in (6, 8) and all(ch in _HEX_DIGITS for ch in token):
        return ColorDecodeResult(color=_decode_hex(token))
    if _NAME_PATTERN.match(token):
        q_color = QColor(token)
        if q_color.isValid():
            return ColorDecodeResult(color=from_qcolor(q_color))
        return _failure(text, f"unknown color name {token!r}")
    return _failure(text, "not a hex color or color name")


def encode_color(color: TabColor) -> str:
    return "#{:02X}{:02X}{:02X}{:02X}".format(color.alpha, color.red, color.green, color.blue)


def to_qcolor(color: TabColor) -> QColor:
    return QColor(color.red, color.green, color.blue, color.alpha)


def from_qcolor(q_color: QColor) -> TabColor:
    if not q_color.isValid():
        raise ValueError("cannot convert an invalid QColor")
    return TabColor(q_color.red(), q_color.green(), q_color.blue(), q_color.alpha())


def to_tk_color(color: TabColor) -> str:
    # Tk colors carry no alpha channel.
    return "#{:02x}{:02x}{:02x}".format(color.red, color.green, color.blue)


def with_rgb(color: TabColor, rgb: Tuple[Any, Any, Any]) -> TabColor:
    """Replace the RGB channels of ``color`` while keeping its alpha."""
    red, green, blue = (max(0, min(255, int(round(float(value))))) for value in rgb)
    return TabColor(red, green, blue, color.alpha)
