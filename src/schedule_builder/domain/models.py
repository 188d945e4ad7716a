from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.config import (
    DAY_LABELS,
    DEFAULT_BLOCK_COLOR,
    DEFAULT_BLOCK_TEXT,
    DEFAULT_END,
    DEFAULT_SHOW_WEEKEND,
    DEFAULT_START,
    DEFAULT_STEP,
    DEFAULT_TITLE,
    WEEKDAYS,
)

# Wire (camelCase) name for every typed meta attribute.
META_FIELDS: Dict[str, str] = {
    "title": "title",
    "days": "days",
    "visible_days": "visibleDays",
    "start_minute": "startMinute",
    "end_minute": "endMinute",
    "minute_step": "minuteStep",
    "show_weekend": "showWeekend",
    "show_time_in_events": "showTimeInEvents",
    "show_dates": "showDates",
    "week": "week",
    "font_family": "fontFamily",
    "event_text_color": "eventTextColor",
    "auto_color": "autoColor",
}


@dataclass(slots=True)
class ScheduleMeta:
    title: str = DEFAULT_TITLE
    days: List[str] = field(default_factory=lambda: list(DAY_LABELS))
    visible_days: List[int] = field(default_factory=lambda: list(WEEKDAYS))
    start_minute: int = DEFAULT_START
    end_minute: int = DEFAULT_END
    minute_step: int = DEFAULT_STEP
    show_weekend: bool = DEFAULT_SHOW_WEEKEND
    show_time_in_events: bool = True
    show_dates: bool = False
    week: str = ""
    font_family: Optional[str] = None
    event_text_color: Optional[str] = None
    auto_color: bool = True
    extras: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = dict(self.extras)
        record.update(
            {
                "title": self.title,
                "days": list(self.days),
                "visibleDays": list(self.visible_days),
                "startMinute": self.start_minute,
                "endMinute": self.end_minute,
                "minuteStep": self.minute_step,
                "showWeekend": self.show_weekend,
                "showTimeInEvents": self.show_time_in_events,
                "showDates": self.show_dates,
                "week": self.week,
                "autoColor": self.auto_color,
            }
        )
        if self.font_family is not None:
            record["fontFamily"] = self.font_family
        if self.event_text_color is not None:
            record["eventTextColor"] = self.event_text_color
        return record


@dataclass(slots=True)
class Block:
    id: str
    day_index: int
    start: int
    end: int
    text: str = DEFAULT_BLOCK_TEXT
    color: str = DEFAULT_BLOCK_COLOR
    notes: str = ""

    @property
    def duration(self) -> int:
        return self.end - self.start

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "dayIndex": self.day_index,
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "color": self.color,
            "notes": self.notes,
        }


@dataclass(slots=True)
class Schedule:
    meta: ScheduleMeta = field(default_factory=ScheduleMeta)
    items: List[Block] = field(default_factory=list)

    def find(self, block_id: str) -> Optional[Block]:
        for block in self.items:
            if block.id == block_id:
                return block
        return None

    def to_record(self) -> Dict[str, Any]:
        return {
            "meta": self.meta.to_record(),
            "items": [block.to_record() for block in self.items],
        }
