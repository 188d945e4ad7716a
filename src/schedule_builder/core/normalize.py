"""Restore schedule invariants after loads, replaces and edits.

Every function here is total: malformed input is corrected toward the
documented defaults or dropped, never raised. Applying any of them twice
gives the same result as applying it once.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional
from uuid import uuid4

from ..domain.models import META_FIELDS, Block, Schedule, ScheduleMeta
from .config import (
    ALLOWED_STEPS,
    DAY_LABELS,
    DEFAULT_BLOCK_COLOR,
    DEFAULT_BLOCK_TEXT,
    DEFAULT_END,
    DEFAULT_SHOW_WEEKEND,
    DEFAULT_START,
    DEFAULT_STEP,
    DEFAULT_TITLE,
    MINUTES_PER_DAY,
    WEEKDAYS,
)
from .days import resolve_visible_days
from .timegrid import as_finite_number, clamp, last_boundary, snap_to_grid

logger = logging.getLogger(__name__)

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

_KNOWN_META_KEYS = frozenset(META_FIELDS.values())


def new_block_id(taken: Iterable[str] = ()) -> str:
    taken = set(taken)
    while True:
        candidate = uuid4().hex[:12]
        if candidate not in taken:
            return candidate


def is_hex_color(value: Any) -> bool:
    return isinstance(value, str) and bool(HEX_COLOR.match(value))


def wire_meta_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Accept attribute names (``end_minute``) or wire names (``endMinute``)."""

    return {META_FIELDS.get(key, key): value for key, value in changes.items()}


def _as_bool(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _as_str(value: Any, default: Optional[str]) -> Optional[str]:
    return value if isinstance(value, str) else default


def _is_allowed_step(value: Any) -> bool:
    number = as_finite_number(value)
    return number is not None and number in ALLOWED_STEPS


def sanitize_meta(raw: Optional[Mapping[str, Any]]) -> ScheduleMeta:
    raw = raw if isinstance(raw, Mapping) else {}

    days = raw.get("days")
    if isinstance(days, list) and len(days) == len(DAY_LABELS):
        day_labels = [str(label) for label in days]
    else:
        day_labels = list(DAY_LABELS)

    show_weekend = _as_bool(raw.get("showWeekend"), DEFAULT_SHOW_WEEKEND)
    visible_days = resolve_visible_days(raw.get("visibleDays"), show_weekend)

    step_raw = raw.get("minuteStep")
    step = int(as_finite_number(step_raw)) if _is_allowed_step(step_raw) else DEFAULT_STEP

    start_raw = as_finite_number(raw.get("startMinute"))
    start = int(clamp(int(start_raw) if start_raw is not None else DEFAULT_START, 0, MINUTES_PER_DAY - step))
    end_raw = as_finite_number(raw.get("endMinute"))
    end = int(clamp(int(end_raw) if end_raw is not None else DEFAULT_END, 0, MINUTES_PER_DAY))
    end = max(end, start + step)

    title = _as_str(raw.get("title"), DEFAULT_TITLE)

    return ScheduleMeta(
        title=title if title is not None else DEFAULT_TITLE,
        days=day_labels,
        visible_days=visible_days,
        start_minute=start,
        end_minute=end,
        minute_step=step,
        show_weekend=show_weekend,
        show_time_in_events=raw.get("showTimeInEvents") is not False,
        show_dates=_as_bool(raw.get("showDates"), False),
        week=_as_str(raw.get("week"), "") or "",
        font_family=_as_str(raw.get("fontFamily"), None),
        event_text_color=_as_str(raw.get("eventTextColor"), None),
        auto_color=_as_bool(raw.get("autoColor"), True),
        extras={key: value for key, value in raw.items() if key not in _KNOWN_META_KEYS},
    )


def merge_meta(current: ScheduleMeta, changes: Mapping[str, Any]) -> ScheduleMeta:
    """Shallow-merge ``changes`` into ``current`` and re-derive day visibility."""

    wire = wire_meta_changes(changes)
    merged = current.to_record()
    merged.update(wire)

    if "minuteStep" in wire and not _is_allowed_step(wire["minuteStep"]):
        logger.debug("Ignoring unsupported minute step %r", wire["minuteStep"])
        merged["minuteStep"] = current.minute_step

    # Turning the weekend back on restores Sat/Sun unless the caller picked days explicitly.
    if wire.get("showWeekend") is True and not current.show_weekend and "visibleDays" not in wire:
        merged["visibleDays"] = sorted(set(current.visible_days) | {5, 6})

    return sanitize_meta(merged)


def sanitize_block(raw: Any, *, fallback_id: Optional[str] = None) -> Optional[Block]:
    """Build a block from a record, or ``None`` when it cannot be placed on any day."""

    if not isinstance(raw, Mapping):
        return None

    start = as_finite_number(raw.get("start"))
    end = as_finite_number(raw.get("end"))
    day = as_finite_number(raw.get("dayIndex"))
    if start is None or end is None or day is None:
        return None
    if not day.is_integer() or int(day) not in WEEKDAYS:
        return None

    identifier = raw.get("id")
    if not isinstance(identifier, str) or not identifier:
        if fallback_id is None:
            return None
        identifier = fallback_id

    text = raw.get("text")
    color = raw.get("color")
    notes = raw.get("notes")
    return Block(
        id=identifier,
        day_index=int(day),
        start=int(start) if start.is_integer() else start,
        end=int(end) if end.is_integer() else end,
        text=text if isinstance(text, str) and text else DEFAULT_BLOCK_TEXT,
        color=color if is_hex_color(color) else DEFAULT_BLOCK_COLOR,
        notes=notes if isinstance(notes, str) else "",
    )


def block_bounds(meta: ScheduleMeta) -> tuple[int, int]:
    """Lowest start and highest end a block may take inside the window."""

    return meta.start_minute, last_boundary(meta.start_minute, meta.end_minute, meta.minute_step)


def fit_block_range(meta: ScheduleMeta, start: float, end: float) -> tuple[int, int]:
    """Clamp into the window, snap to the step grid, and clamp again."""

    step = meta.minute_step
    low, high = block_bounds(meta)

    start = clamp(start, low, high - step)
    end = clamp(end, start + step, high)

    start = snap_to_grid(start, low, step)
    end = snap_to_grid(end, low, step)

    start = clamp(start, low, high - step)
    end = clamp(end, start + step, high)
    return int(start), int(end)


def normalize_blocks(meta: ScheduleMeta, blocks: Iterable[Block]) -> List[Block]:
    """Drop blocks outside the window and re-snap the rest, preserving order."""

    kept: List[Block] = []
    dropped = 0
    for block in blocks:
        if block.end <= meta.start_minute or block.start >= meta.end_minute:
            dropped += 1
            continue
        start, end = fit_block_range(meta, block.start, block.end)
        kept.append(replace(block, start=start, end=end))
    if dropped:
        logger.debug("Dropped %d block(s) outside %d-%d", dropped, meta.start_minute, meta.end_minute)
    return kept


def normalize_schedule(raw: Mapping[str, Any]) -> Schedule:
    meta = sanitize_meta(raw.get("meta"))
    items = raw.get("items") or []
    blocks: List[Block] = []
    seen: set[str] = set()
    for record in items:
        block = sanitize_block(record, fallback_id=new_block_id(seen))
        if block is None:
            continue
        if block.id in seen:
            block.id = new_block_id(seen)
        seen.add(block.id)
        blocks.append(block)
    return Schedule(meta=meta, items=normalize_blocks(meta, blocks))


def is_schedule_shape(raw: Any) -> bool:
    return isinstance(raw, Mapping) and isinstance(raw.get("meta"), Mapping) and isinstance(raw.get("items"), list)


__all__ = [
    "block_bounds",
    "fit_block_range",
    "is_hex_color",
    "is_schedule_shape",
    "merge_meta",
    "new_block_id",
    "normalize_blocks",
    "normalize_schedule",
    "sanitize_block",
    "sanitize_meta",
    "wire_meta_changes",
]
