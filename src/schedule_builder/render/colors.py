from __future__ import annotations

import math
from typing import Optional, Tuple

from ..core.normalize import is_hex_color

FILL_ALPHA = 0.22
BORDER_ALPHA = 0.45
DEFAULT_ACCENT_RGB: Tuple[int, int, int] = (79, 70, 229)

_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619


def parse_hex_color(value: Optional[str]) -> Optional[Tuple[int, int, int]]:
    if not is_hex_color(value):
        return None
    assert value is not None
    return int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16)


def with_alpha(value: Optional[str], alpha: float) -> str:
    red, green, blue = parse_hex_color(value) or DEFAULT_ACCENT_RGB
    return f"rgba({red},{green},{blue},{alpha})"


def fill_color(value: Optional[str]) -> str:
    return with_alpha(value, FILL_ALPHA)


def border_color(value: Optional[str]) -> str:
    return with_alpha(value, BORDER_ALPHA)


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def hsl_to_hex(hue: float, saturation: float, lightness: float) -> str:
    saturation /= 100
    lightness /= 100
    chroma = (1 - abs(2 * lightness - 1)) * saturation
    secondary = chroma * (1 - abs((hue / 60) % 2 - 1))
    match = lightness - chroma / 2

    if hue < 60:
        red, green, blue = chroma, secondary, 0.0
    elif hue < 120:
        red, green, blue = secondary, chroma, 0.0
    elif hue < 180:
        red, green, blue = 0.0, chroma, secondary
    elif hue < 240:
        red, green, blue = 0.0, secondary, chroma
    elif hue < 300:
        red, green, blue = secondary, 0.0, chroma
    else:
        red, green, blue = chroma, 0.0, secondary

    def _channel(component: float) -> str:
        return f"{int(math.floor((component + match) * 255 + 0.5)):02x}"

    return f"#{_channel(red)}{_channel(green)}{_channel(blue)}"


def auto_color(text: str) -> str:
    """Stable color for a block label (FNV-1a hash of the text mapped to a hue)."""

    digest = _FNV_OFFSET
    units = text.encode("utf-16-le")
    for index in range(0, len(units), 2):
        code = units[index] | (units[index + 1] << 8)
        digest = _int32(digest ^ code)
        digest = _int32(digest * _FNV_PRIME)
    return hsl_to_hex(abs(digest) % 360, 74, 55)


__all__ = [
    "BORDER_ALPHA",
    "DEFAULT_ACCENT_RGB",
    "FILL_ALPHA",
    "auto_color",
    "border_color",
    "fill_color",
    "hsl_to_hex",
    "parse_hex_color",
    "with_alpha",
]
