"""Share links: HTTP client and the backend that stores shared snapshots."""

from __future__ import annotations

from .client import ShareClient, ShareReceipt
from .repository import SharedSchedule, SharedScheduleRepository
from .validation import validate_schedule_payload

__all__ = [
    "ShareClient",
    "ShareReceipt",
    "SharedSchedule",
    "SharedScheduleRepository",
    "validate_schedule_payload",
]
