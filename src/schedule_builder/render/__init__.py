"""Projection of schedule state onto grid geometry."""

from __future__ import annotations

from .colors import auto_color, border_color, fill_color, with_alpha
from .projection import (
    AxisLabel,
    BlockVisual,
    ContainerMetrics,
    DayColumn,
    GridProjection,
    column_width,
    render_schedule,
)

__all__ = [
    "AxisLabel",
    "BlockVisual",
    "ContainerMetrics",
    "DayColumn",
    "GridProjection",
    "auto_color",
    "border_color",
    "column_width",
    "fill_color",
    "render_schedule",
    "with_alpha",
]
