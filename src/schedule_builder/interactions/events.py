from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..domain.enums import GestureKind
from ..domain.models import Block


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """A pointer sample in client coordinates."""

    x: float
    y: float
    pointer_id: int = 1


@dataclass(frozen=True, slots=True)
class GridPosition:
    column: int
    day_index: int
    minutes: float


@dataclass(frozen=True, slots=True)
class BlockHit:
    block_id: str
    on_handle: bool


@dataclass(frozen=True, slots=True)
class PendingAdd:
    text: str = ""
    color: Optional[str] = None
    notes: str = ""


@dataclass(slots=True)
class Gesture:
    kind: GestureKind
    block_id: str
    pointer_id: int
    grab_offset: float
    origin_day: int
    origin_start: int
    origin_end: int
    moved: bool = False

    @property
    def duration(self) -> int:
        return self.origin_end - self.origin_start


@dataclass(frozen=True, slots=True)
class AddRequest:
    day_index: int
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class EditRequest:
    block_id: str


@dataclass(frozen=True, slots=True)
class BlockPlaced:
    block: Block


ClickResult = Union[AddRequest, EditRequest, BlockPlaced]
