"""Project a schedule onto pixel geometry.

The projection is a pure function of the schedule and the container
metrics; it owns no state and can be recomputed on every frame. A thin
presentation layer turns the records below into real widgets or markup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import GridSettings, get_settings
from ..core.days import column_for_day, resolve_visible_days
from ..core.timegrid import format_minutes, minutes_to_pixels
from ..domain.enums import ClockMode
from ..domain.models import Schedule
from .colors import border_color, fill_color


@dataclass(frozen=True, slots=True)
class ContainerMetrics:
    """Measured grid container: client-space origin, size and scroll offsets."""

    width: float = 0.0
    height: float = 0.0
    left: float = 0.0
    top: float = 0.0
    scroll_left: float = 0.0
    scroll_top: float = 0.0

    def to_content(self, x: float, y: float) -> Tuple[float, float]:
        """Client coordinates to coordinates inside the scrolled grid content."""

        return x - self.left + self.scroll_left, y - self.top + self.scroll_top


@dataclass(frozen=True, slots=True)
class DayColumn:
    column: int
    day_index: int
    label: str
    left: float
    width: float


@dataclass(frozen=True, slots=True)
class AxisLabel:
    minute: int
    top: float
    text: str


@dataclass(frozen=True, slots=True)
class BlockVisual:
    block_id: str
    day_index: int
    column: int
    top: float
    height: float
    left: float
    width: float
    title: str
    time_label: Optional[str]
    fill: str
    border: str
    resize_handle: bool

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True, slots=True)
class GridProjection:
    start_minute: int
    end_minute: int
    minute_step: int
    px_per_minute: float
    column_width: float
    total_height: float
    minor_px: float
    hour_px: float
    editable: bool
    visible_days: Tuple[int, ...]
    columns: Tuple[DayColumn, ...] = field(default_factory=tuple)
    axis: Tuple[AxisLabel, ...] = field(default_factory=tuple)
    blocks: Tuple[BlockVisual, ...] = field(default_factory=tuple)
    font_family: Optional[str] = None
    text_color: Optional[str] = None

    def visual_for(self, block_id: str) -> Optional[BlockVisual]:
        for visual in self.blocks:
            if visual.block_id == block_id:
                return visual
        return None


def column_width(container_width: float, column_count: int, fallback: float) -> float:
    if container_width > 0 and column_count > 0:
        return container_width / column_count
    return fallback


def render_schedule(
    schedule: Schedule,
    metrics: Optional[ContainerMetrics] = None,
    *,
    editable: bool = True,
    grid: Optional[GridSettings] = None,
    clock_mode: Optional[ClockMode] = None,
) -> GridProjection:
    grid = grid or get_settings().grid
    metrics = metrics or ContainerMetrics()
    meta = schedule.meta
    ppm = grid.px_per_minute

    visible = resolve_visible_days(meta.visible_days, meta.show_weekend)
    col_width = column_width(metrics.width, len(visible), grid.fallback_column_width)
    gap = grid.block_gap

    columns = tuple(
        DayColumn(
            column=index,
            day_index=day,
            label=meta.days[day] if day < len(meta.days) else "",
            left=index * col_width,
            width=col_width,
        )
        for index, day in enumerate(visible)
    )

    axis: List[AxisLabel] = []
    for minute in range(meta.start_minute, meta.end_minute, grid.axis_row_minutes):
        axis.append(
            AxisLabel(
                minute=minute,
                top=minutes_to_pixels(minute - meta.start_minute, ppm),
                text=format_minutes(minute, clock_mode),
            )
        )

    visuals: List[BlockVisual] = []
    for block in schedule.items:
        column = column_for_day(visible, block.day_index)
        if column is None:
            continue
        time_label = None
        if meta.show_time_in_events:
            time_label = f"{format_minutes(block.start, clock_mode)} - {format_minutes(block.end, clock_mode)}"
        visuals.append(
            BlockVisual(
                block_id=block.id,
                day_index=block.day_index,
                column=column,
                top=minutes_to_pixels(block.start - meta.start_minute, ppm),
                height=max(grid.min_block_height, minutes_to_pixels(block.end - block.start, ppm)),
                left=column * col_width + gap,
                width=max(grid.min_block_width, col_width - gap * 2),
                title=block.text,
                time_label=time_label,
                fill=fill_color(block.color),
                border=border_color(block.color),
                resize_handle=editable,
            )
        )

    return GridProjection(
        start_minute=meta.start_minute,
        end_minute=meta.end_minute,
        minute_step=meta.minute_step,
        px_per_minute=ppm,
        column_width=col_width,
        total_height=minutes_to_pixels(meta.end_minute - meta.start_minute, ppm),
        minor_px=minutes_to_pixels(meta.minute_step, ppm),
        hour_px=minutes_to_pixels(60, ppm),
        editable=editable,
        visible_days=tuple(visible),
        columns=columns,
        axis=tuple(axis),
        blocks=tuple(visuals),
        font_family=meta.font_family,
        text_color=meta.event_text_color,
    )


__all__ = [
    "AxisLabel",
    "BlockVisual",
    "ContainerMetrics",
    "DayColumn",
    "GridProjection",
    "column_width",
    "render_schedule",
]
