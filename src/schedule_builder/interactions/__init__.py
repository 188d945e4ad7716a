"""Pointer-driven click, drag and resize handling."""

from __future__ import annotations

from .engine import InteractionEngine
from .events import (
    AddRequest,
    BlockHit,
    BlockPlaced,
    ClickResult,
    EditRequest,
    Gesture,
    GridPosition,
    PendingAdd,
    PointerEvent,
)

__all__ = [
    "AddRequest",
    "BlockHit",
    "BlockPlaced",
    "ClickResult",
    "EditRequest",
    "Gesture",
    "GridPosition",
    "InteractionEngine",
    "PendingAdd",
    "PointerEvent",
]
