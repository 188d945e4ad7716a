"""
Shared pytest fixtures for the schedule builder.

Every test runs against a throwaway data directory so nothing touches the
user's real schedule, UI settings or share database.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from schedule_builder.config import get_settings
from schedule_builder.core.storage import KeyValueStorage
from schedule_builder.core.store import ScheduleStore
from schedule_builder.core.timegrid import reset_clock_mode_cache

_ENV_OVERRIDES = (
    "SCHEDULE_STATE_FILE",
    "SCHEDULE_UI_SETTINGS_FILE",
    "SCHEDULE_STORAGE_KEY",
    "SCHEDULE_SHARE_DB",
    "SCHEDULE_SHARE_URL",
    "SCHEDULE_SHARE_MAX_BYTES",
    "SCHEDULE_SHARE_EXPIRY_DAYS",
    "SCHEDULE_PX_PER_MINUTE",
    "SCHEDULE_FALLBACK_COLUMN_WIDTH",
    "SCHEDULE_CLICK_SUPPRESS_MS",
    "SCHEDULE_DEFAULT_BLOCK_MINUTES",
    "SCHEDULE_LOG_LEVEL",
    "SCHEDULE_CONSOLE_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_data_dir(tmp_path, monkeypatch):
    """Point every file the app writes at ``tmp_path`` and reset cached settings."""

    for name in _ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SCHEDULE_BUILDER_DATA_DIR", str(tmp_path / "data"))
    get_settings.cache_clear()
    reset_clock_mode_cache()
    yield tmp_path / "data"
    get_settings.cache_clear()
    reset_clock_mode_cache()


@pytest.fixture
def storage(tmp_path) -> KeyValueStorage:
    return KeyValueStorage(tmp_path / "state.json")


@pytest.fixture
def store(storage) -> ScheduleStore:
    return ScheduleStore(storage)


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
