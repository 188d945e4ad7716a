from __future__ import annotations

from enum import Enum


class ClockMode(str, Enum):
    H24 = "24"
    H12 = "12"


class GestureKind(str, Enum):
    MOVE = "move"
    RESIZE = "resize"


class InteractionState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"
