"""Conversions between minutes-of-day, grid steps and pixel offsets."""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Union

from ..config import get_settings
from ..domain.enums import ClockMode
from .config import CLOCK_MODE_KEY
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

Number = Union[int, float]

_cached_mode: Optional[ClockMode] = None


def as_finite_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def clamp(value: Number, low: Number, high: Number) -> Number:
    return max(low, min(high, value))


def round_to_step(value: Number, step: Number) -> Number:
    """Nearest multiple of ``step``; a value exactly between two multiples goes up."""

    return math.floor(value / step + 0.5) * step


def snap_to_grid(value: Number, origin: Number, step: Number) -> Number:
    return origin + round_to_step(value - origin, step)


def last_boundary(origin: int, limit: int, step: int) -> int:
    """Largest ``origin + k * step`` that does not exceed ``limit``."""

    return origin + ((limit - origin) // step) * step


def minutes_to_pixels(minutes: Number, px_per_minute: float) -> float:
    return minutes * px_per_minute


def pixels_to_minutes(pixels: Number, px_per_minute: float) -> float:
    return pixels / px_per_minute


def time_input_to_minutes(value: Optional[str]) -> int:
    if not value or ":" not in value:
        return 0
    hours_raw, _, minutes_raw = value.partition(":")
    hours = as_finite_number(hours_raw)
    minutes = as_finite_number(minutes_raw) or 0
    if hours is None:
        return 0
    return int(hours) * 60 + int(minutes)


def minutes_to_time_input(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _default_storage() -> KeyValueStorage:
    return KeyValueStorage(get_settings().storage.ui_settings_file)


def get_clock_mode(storage: Optional[KeyValueStorage] = None) -> ClockMode:
    global _cached_mode
    if _cached_mode is not None:
        return _cached_mode
    raw = (storage or _default_storage()).get(CLOCK_MODE_KEY)
    try:
        _cached_mode = ClockMode(raw)
    except ValueError:
        _cached_mode = ClockMode.H24
    return _cached_mode


def set_clock_mode(mode: Union[ClockMode, str], storage: Optional[KeyValueStorage] = None) -> ClockMode:
    global _cached_mode
    resolved = ClockMode.H12 if str(getattr(mode, "value", mode)) == ClockMode.H12.value else ClockMode.H24
    _cached_mode = resolved
    (storage or _default_storage()).set(CLOCK_MODE_KEY, resolved.value)
    logger.debug("Clock mode set to %sh", resolved.value)
    return resolved


def reset_clock_mode_cache() -> None:
    global _cached_mode
    _cached_mode = None


def format_minutes(minutes: Any, mode: Optional[ClockMode] = None) -> str:
    total = as_finite_number(minutes)
    if total is None:
        return ""

    rounded = int(math.floor(total + 0.5))
    hours = (rounded // 60) % 24
    mins = rounded % 60

    if (mode or get_clock_mode()) is ClockMode.H12:
        period = "PM" if hours >= 12 else "AM"
        hours12 = hours % 12 or 12
        return f"{hours12}:{mins:02d} {period}"

    return f"{hours:02d}:{mins:02d}"
