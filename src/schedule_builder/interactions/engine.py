from __future__ import annotations

import logging
import math
import time
from typing import Callable, Optional, Tuple

from ..config import GridSettings, get_settings
from ..core.normalize import block_bounds
from ..core.store import ScheduleStore
from ..core.timegrid import clamp, minutes_to_pixels, pixels_to_minutes, snap_to_grid
from ..domain.enums import GestureKind, InteractionState
from ..render.colors import auto_color
from ..render.projection import ContainerMetrics, GridProjection, render_schedule
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

logger = logging.getLogger(__name__)

RenderCallback = Callable[[GridProjection], None]


class InteractionEngine:
    """Pointer state machine over the rendered grid: Idle, Dragging or Resizing.

    A gesture's target is always recomputed from the absolute pointer
    position and the block's values at pointer-down, so repeated snapping
    never accumulates drift. Each frame is clamped into the window before it
    is written to the store, which keeps every intermediate state valid.
    """

    def __init__(
        self,
        store: ScheduleStore,
        *,
        metrics: Optional[ContainerMetrics] = None,
        grid: Optional[GridSettings] = None,
        clock: Callable[[], float] = time.monotonic,
        request_render: Optional[RenderCallback] = None,
        pending_add: Optional[PendingAdd] = None,
    ) -> None:
        self._store = store
        self._metrics = metrics or ContainerMetrics()
        self._grid = grid or get_settings().grid
        self._clock = clock
        self._request_render = request_render
        self._gesture: Optional[Gesture] = None
        self._suppress_clicks_until = float("-inf")
        self.pending_add = pending_add
        self.selected_id: Optional[str] = None

    @property
    def state(self) -> InteractionState:
        if self._gesture is None:
            return InteractionState.IDLE
        if self._gesture.kind is GestureKind.RESIZE:
            return InteractionState.RESIZING
        return InteractionState.DRAGGING

    @property
    def gesture(self) -> Optional[Gesture]:
        return self._gesture

    @property
    def metrics(self) -> ContainerMetrics:
        return self._metrics

    def update_metrics(self, metrics: ContainerMetrics) -> None:
        self._metrics = metrics

    def layout(self) -> GridProjection:
        return render_schedule(self._store.state, self._metrics, editable=True, grid=self._grid)

    def arm_add(self, text: str = "", color: Optional[str] = None, notes: str = "") -> PendingAdd:
        self.pending_add = PendingAdd(text=text, color=color, notes=notes)
        return self.pending_add

    def disarm_add(self) -> None:
        self.pending_add = None

    # -- coordinate mapping -------------------------------------------------

    def position_at(self, event: PointerEvent, projection: Optional[GridProjection] = None) -> GridPosition:
        projection = projection or self.layout()
        x, y = self._metrics.to_content(event.x, event.y)
        last_column = len(projection.visible_days) - 1
        column = int(clamp(math.floor(x / projection.column_width), 0, last_column))
        minutes = projection.start_minute + pixels_to_minutes(y, projection.px_per_minute)
        return GridPosition(column=column, day_index=projection.visible_days[column], minutes=minutes)

    def hit_test(self, event: PointerEvent, projection: Optional[GridProjection] = None) -> Optional[BlockHit]:
        projection = projection or self.layout()
        x, y = self._metrics.to_content(event.x, event.y)
        # Later blocks paint on top.
        for visual in reversed(projection.blocks):
            if visual.contains(x, y):
                # At most a third of the block; the rest always drags.
                handle = min(self._grid.handle_height, visual.height / 3)
                on_handle = visual.resize_handle and y >= visual.bottom - handle
                return BlockHit(block_id=visual.block_id, on_handle=on_handle)
        return None

    def suggest_range(self, minutes: float) -> Tuple[int, int]:
        meta = self._store.state.meta
        step = meta.minute_step
        low, high = block_bounds(meta)
        start = clamp(snap_to_grid(minutes, low, step), low, high - step)
        end = clamp(snap_to_grid(start + self._grid.default_block_minutes, low, step), start + step, high)
        return int(start), int(end)

    # -- pointer lifecycle --------------------------------------------------

    def pointer_down(self, event: PointerEvent) -> bool:
        if self._gesture is not None:
            return False
        hit = self.hit_test(event)
        if hit is None:
            return False
        block = self._store.find_item(hit.block_id)
        if block is None:
            return False

        meta = self._store.state.meta
        _, y = self._metrics.to_content(event.x, event.y)
        top = minutes_to_pixels(block.start - meta.start_minute, self._grid.px_per_minute)

        self.selected_id = block.id
        self._gesture = Gesture(
            kind=GestureKind.RESIZE if hit.on_handle else GestureKind.MOVE,
            block_id=block.id,
            pointer_id=event.pointer_id,
            grab_offset=y - top,
            origin_day=block.day_index,
            origin_start=block.start,
            origin_end=block.end,
        )
        logger.debug("Started %s gesture on block %s", self._gesture.kind.value, block.id)
        return True

    def pointer_move(self, event: PointerEvent) -> bool:
        gesture = self._gesture
        if gesture is None or event.pointer_id != gesture.pointer_id:
            return False
        if self._store.find_item(gesture.block_id) is None:
            self._abandon(gesture)
            return False

        if gesture.kind is GestureKind.MOVE:
            day_index, start, end = self._move_target(gesture, event)
        else:
            day_index, start, end = self._resize_target(gesture, event)

        self._store.apply_live(gesture.block_id, day_index=day_index, start=start, end=end)
        gesture.moved = True
        self._suppress_clicks()
        if self._request_render is not None:
            self._request_render(self.layout())
        return True

    def pointer_up(self, event: PointerEvent) -> bool:
        return self._finish(event)

    def pointer_cancel(self, event: PointerEvent) -> bool:
        # The last applied frame is already valid; it is kept rather than rolled back.
        return self._finish(event)

    def click(self, event: PointerEvent) -> Optional[ClickResult]:
        if self._gesture is not None or self._clock() < self._suppress_clicks_until:
            return None

        projection = self.layout()
        hit = self.hit_test(event, projection)
        if hit is not None:
            self.selected_id = hit.block_id
            return EditRequest(block_id=hit.block_id)

        position = self.position_at(event, projection)
        start, end = self.suggest_range(position.minutes)

        pending = self.pending_add
        if pending is None:
            return AddRequest(day_index=position.day_index, start=start, end=end)

        self.pending_add = None
        color = pending.color
        if not color and pending.text and self._store.state.meta.auto_color:
            color = auto_color(pending.text)
        block = self._store.add_item(position.day_index, start, end, pending.text, color or "", pending.notes)
        self.selected_id = block.id
        return BlockPlaced(block=block)

    # -- internals ----------------------------------------------------------

    def _move_target(self, gesture: Gesture, event: PointerEvent) -> Tuple[int, int, int]:
        meta = self._store.state.meta
        projection = self.layout()
        position = self.position_at(event, projection)
        _, y = self._metrics.to_content(event.x, event.y)

        low, high = block_bounds(meta)
        duration = min(gesture.duration, high - low)
        raw_start = meta.start_minute + pixels_to_minutes(y - gesture.grab_offset, projection.px_per_minute)
        start = clamp(snap_to_grid(raw_start, low, meta.minute_step), low, high - duration)
        return position.day_index, int(start), int(start + duration)

    def _resize_target(self, gesture: Gesture, event: PointerEvent) -> Tuple[int, int, int]:
        meta = self._store.state.meta
        _, y = self._metrics.to_content(event.x, event.y)

        low, high = block_bounds(meta)
        raw_end = meta.start_minute + pixels_to_minutes(y, self._grid.px_per_minute)
        end = clamp(snap_to_grid(raw_end, low, meta.minute_step), gesture.origin_start + meta.minute_step, high)
        return gesture.origin_day, gesture.origin_start, int(end)

    def _finish(self, event: PointerEvent) -> bool:
        gesture = self._gesture
        if gesture is None or event.pointer_id != gesture.pointer_id:
            return False
        self._gesture = None
        if self._store.find_item(gesture.block_id) is None:
            logger.debug("Block %s vanished mid-gesture; nothing to commit", gesture.block_id)
            return False
        if gesture.moved:
            self._suppress_clicks()
            self._store.commit()
        return True

    def _suppress_clicks(self) -> None:
        self._suppress_clicks_until = self._clock() + self._grid.click_suppress_ms / 1000

    def _abandon(self, gesture: Gesture) -> None:
        logger.debug("Abandoning %s gesture; block %s no longer exists", gesture.kind.value, gesture.block_id)
        self._gesture = None


__all__ = ["InteractionEngine"]
