"""Which weekday columns are displayed, and in what order.

A block's ``day_index`` is a weekday identity (0=Mon .. 6=Sun). The grid
renders a contiguous run of columns 0..N-1 over a subset of those
identities, so every caller translating between the two goes through here.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

from .config import WEEKDAYS, WORKWEEK


def sanitize_visible_days(values: Iterable[Any]) -> List[int]:
    seen: set[int] = set()
    for value in values:
        if isinstance(value, bool):
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        if not number.is_integer():
            continue
        day = int(number)
        if 0 <= day <= 6:
            seen.add(day)
    return sorted(seen)


def resolve_visible_days(visible_days: Optional[Iterable[Any]], show_weekend: bool) -> List[int]:
    """Ordered weekday identities to render; never empty."""

    if visible_days is None or isinstance(visible_days, (str, bytes, dict)):
        candidates = list(WEEKDAYS if show_weekend else WORKWEEK)
    else:
        candidates = sanitize_visible_days(visible_days)

    if not show_weekend:
        candidates = [day for day in candidates if day < 5]

    if not candidates:
        return list(WEEKDAYS if show_weekend else WORKWEEK)
    return candidates


def column_for_day(visible_days: Sequence[int], day_index: int) -> Optional[int]:
    try:
        return list(visible_days).index(day_index)
    except ValueError:
        return None


def day_for_column(visible_days: Sequence[int], column: int) -> int:
    if not visible_days:
        raise ValueError("visible_days must not be empty")
    column = max(0, min(len(visible_days) - 1, column))
    return visible_days[column]


__all__ = ["column_for_day", "day_for_column", "resolve_visible_days", "sanitize_visible_days"]
