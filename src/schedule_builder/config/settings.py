from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..core.config import (
    AXIS_ROW_MINUTES,
    DATA_DIR,
    DEFAULT_BLOCK_MINUTES,
    PX_PER_MINUTE,
    STORAGE_KEY,
)

load_dotenv()


@dataclass(frozen=True)
class GridSettings:
    px_per_minute: float = PX_PER_MINUTE
    axis_row_minutes: int = AXIS_ROW_MINUTES
    fallback_column_width: float = 120.0
    block_gap: float = 2.0
    min_block_height: float = 8.0
    min_block_width: float = 8.0
    handle_height: float = 8.0
    click_suppress_ms: int = 250
    default_block_minutes: int = DEFAULT_BLOCK_MINUTES


@dataclass(frozen=True)
class StorageSettings:
    data_dir: Path
    state_file: Path
    ui_settings_file: Path
    storage_key: str


@dataclass(frozen=True)
class RemoteSettings:
    base_url: str
    timeout_seconds: float
    host: str
    port: int
    database_file: Path
    max_payload_bytes: int
    expiry_days: Optional[int]

    def view_url(self, schedule_id: str) -> str:
        return f"{self.base_url.rstrip('/')}/s/{schedule_id}"


@dataclass(frozen=True)
class AppSettings:
    grid: GridSettings
    storage: StorageSettings
    remote: RemoteSettings
    log_level: str
    console_log_level: Optional[str] = None


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _optional_int_from_env(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    data_dir = Path(os.getenv("SCHEDULE_BUILDER_DATA_DIR") or DATA_DIR)

    grid = GridSettings(
        px_per_minute=_float_from_env("SCHEDULE_PX_PER_MINUTE", PX_PER_MINUTE),
        fallback_column_width=_float_from_env("SCHEDULE_FALLBACK_COLUMN_WIDTH", 120.0),
        click_suppress_ms=_int_from_env("SCHEDULE_CLICK_SUPPRESS_MS", 250),
        default_block_minutes=_int_from_env("SCHEDULE_DEFAULT_BLOCK_MINUTES", DEFAULT_BLOCK_MINUTES),
    )

    storage = StorageSettings(
        data_dir=data_dir,
        state_file=Path(os.getenv("SCHEDULE_STATE_FILE") or data_dir / "schedule_state.json"),
        ui_settings_file=Path(os.getenv("SCHEDULE_UI_SETTINGS_FILE") or data_dir / "ui_settings.json"),
        storage_key=os.getenv("SCHEDULE_STORAGE_KEY", STORAGE_KEY),
    )

    remote = RemoteSettings(
        base_url=os.getenv("SCHEDULE_SHARE_URL", "http://127.0.0.1:8000"),
        timeout_seconds=_float_from_env("SCHEDULE_SHARE_TIMEOUT", 10.0),
        host=os.getenv("SCHEDULE_SERVER_HOST", "127.0.0.1"),
        port=_int_from_env("SCHEDULE_SERVER_PORT", 8000),
        database_file=Path(os.getenv("SCHEDULE_SHARE_DB") or data_dir / "shared_schedules.json"),
        max_payload_bytes=_int_from_env("SCHEDULE_SHARE_MAX_BYTES", 200_000),
        expiry_days=_optional_int_from_env("SCHEDULE_SHARE_EXPIRY_DAYS"),
    )

    return AppSettings(
        grid=grid,
        storage=storage,
        remote=remote,
        log_level=os.getenv("SCHEDULE_LOG_LEVEL", "INFO").upper(),
        console_log_level=(os.getenv("SCHEDULE_CONSOLE_LOG_LEVEL") or "").upper() or None,
    )
