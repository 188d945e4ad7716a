"""Domain records for weekly schedules."""

from __future__ import annotations

from .enums import ClockMode, GestureKind, InteractionState
from .models import META_FIELDS, Block, Schedule, ScheduleMeta

__all__ = [
    "Block",
    "ClockMode",
    "GestureKind",
    "InteractionState",
    "META_FIELDS",
    "Schedule",
    "ScheduleMeta",
]
