from __future__ import annotations

from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "Schedule Builder"
APP_AUTHOR = "ScheduleBuilder"
DATA_DIR = Path(user_data_dir(APP_NAME, APP_AUTHOR))
STATE_FILE = DATA_DIR / "schedule_state.json"
UI_SETTINGS_FILE = DATA_DIR / "ui_settings.json"
SHARE_DATABASE_FILE = DATA_DIR / "shared_schedules.json"

STORAGE_KEY = "schedule_builder_v1"
CLOCK_MODE_KEY = "sb_schedule_mode_v1"

MINUTES_PER_DAY = 24 * 60
DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEKDAYS = (0, 1, 2, 3, 4, 5, 6)
WORKWEEK = (0, 1, 2, 3, 4)
ALLOWED_STEPS = (5, 10, 15, 30, 60)

DEFAULT_TITLE = "My Schedule"
DEFAULT_START = 8 * 60
DEFAULT_END = 20 * 60
DEFAULT_STEP = 15
DEFAULT_SHOW_WEEKEND = True
DEFAULT_BLOCK_MINUTES = 60
DEFAULT_BLOCK_TEXT = "Block"
DEFAULT_BLOCK_COLOR = "#4f46e5"
DEFAULT_FONT_FAMILY = "system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif"
DEFAULT_EVENT_TEXT_COLOR = "#1b1f2a"

PX_PER_MINUTE = 1.6
AXIS_ROW_MINUTES = 60


def ensure_data_dir(path: Path = DATA_DIR) -> None:
    path.mkdir(parents=True, exist_ok=True)
