"""Shape and size limits for documents submitted to the share backend."""

from __future__ import annotations

import re
from typing import Any, Mapping

from ..core.config import ALLOWED_STEPS, MINUTES_PER_DAY
from ..errors import InvalidSchedulePayload

MAX_ITEMS = 500
MAX_TITLE = 120
MAX_DAY_LABEL = 12
MAX_TEXT = 80
MAX_NOTES = 500

_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")
_ITEM_ID = re.compile(r"^[0-9a-zA-Z_-]{3,64}$")


def is_int_like(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    if isinstance(value, str):
        try:
            return str(int(value)) == value
        except ValueError:
            return False
    return False


def is_bool_like(value: Any) -> bool:
    return isinstance(value, bool) or value in (0, 1, "0", "1")


def validate_schedule_payload(data: Any) -> None:
    """Raise ``InvalidSchedulePayload`` with the first problem found."""

    if not isinstance(data, Mapping):
        raise InvalidSchedulePayload("Payload must be a JSON object.")
    meta = data.get("meta")
    if not isinstance(meta, Mapping):
        raise InvalidSchedulePayload('Missing "meta" object.')
    items = data.get("items")
    if not isinstance(items, list):
        raise InvalidSchedulePayload('Missing "items" array.')

    if len(items) > MAX_ITEMS:
        raise InvalidSchedulePayload(f"Too many items (max {MAX_ITEMS}).")

    if len(str(meta.get("title") or "")) > MAX_TITLE:
        raise InvalidSchedulePayload(f"Title too long (max {MAX_TITLE}).")

    days = meta.get("days")
    if not isinstance(days, list) or not 1 <= len(days) <= 7:
        raise InvalidSchedulePayload('"meta.days" must be an array of 1..7 values.')
    for label in days:
        if not isinstance(label, str) or not 1 <= len(label) <= MAX_DAY_LABEL:
            raise InvalidSchedulePayload("Each day label must be a short string.")

    start, end, step = meta.get("startMinute"), meta.get("endMinute"), meta.get("minuteStep")
    if not (is_int_like(start) and is_int_like(end) and is_int_like(step)):
        raise InvalidSchedulePayload('"startMinute", "endMinute", "minuteStep" must be numbers.')
    start, end, step = int(start), int(end), int(step)

    if not 0 <= start <= MINUTES_PER_DAY:
        raise InvalidSchedulePayload("startMinute out of range.")
    if not 0 <= end <= MINUTES_PER_DAY:
        raise InvalidSchedulePayload("endMinute out of range.")
    if end <= start:
        raise InvalidSchedulePayload("endMinute must be greater than startMinute.")
    if step not in ALLOWED_STEPS:
        allowed = ",".join(str(value) for value in ALLOWED_STEPS)
        raise InvalidSchedulePayload(f"minuteStep must be one of {allowed}.")
    if not is_bool_like(meta.get("showWeekend")):
        raise InvalidSchedulePayload("showWeekend must be boolean.")

    for index, item in enumerate(items):
        _validate_item(index, item, start, end)


def _validate_item(index: int, item: Any, window_start: int, window_end: int) -> None:
    if not isinstance(item, Mapping):
        raise InvalidSchedulePayload(f"Item #{index} must be an object.")

    day, start, end = item.get("dayIndex"), item.get("start"), item.get("end")
    if not (is_int_like(day) and is_int_like(start) and is_int_like(end)):
        raise InvalidSchedulePayload(f"Item #{index} missing numeric fields (dayIndex/start/end).")
    day, start, end = int(day), int(start), int(end)

    if not 0 <= day <= 6:
        raise InvalidSchedulePayload(f"Item #{index} dayIndex out of range.")
    if not window_start <= start <= window_end:
        raise InvalidSchedulePayload(f"Item #{index} start out of range.")
    if not window_start <= end <= window_end:
        raise InvalidSchedulePayload(f"Item #{index} end out of range.")
    if end <= start:
        raise InvalidSchedulePayload(f"Item #{index} end must be greater than start.")

    text = str(item.get("text") or "")
    if not 1 <= len(text) <= MAX_TEXT:
        raise InvalidSchedulePayload(f"Item #{index} text must be 1..{MAX_TEXT} chars.")

    color = str(item.get("color") or "")
    if color and not _COLOR.match(color):
        raise InvalidSchedulePayload(f"Item #{index} color must be #RRGGBB.")

    if len(str(item.get("notes") or "")) > MAX_NOTES:
        raise InvalidSchedulePayload(f"Item #{index} notes too long (max {MAX_NOTES}).")

    identifier = str(item.get("id") or "")
    if identifier and not _ITEM_ID.match(identifier):
        raise InvalidSchedulePayload(f"Item #{index} has invalid id.")
