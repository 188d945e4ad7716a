"""Weekly schedule builder: document store, grid projection and pointer interactions."""

from __future__ import annotations

from .core.store import ScheduleStore as ScheduleStore
from .interactions.engine import InteractionEngine as InteractionEngine
from .render.projection import render_schedule as render_schedule

__all__ = ["InteractionEngine", "ScheduleStore", "main", "render_schedule"]


def main() -> None:
    from .cli import main as cli_main

    raise SystemExit(cli_main())
