from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import get_settings
from .core.config import ensure_data_dir


_INITIALIZED = False

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level_number(name: Optional[str], default: int = logging.INFO) -> int:
    if not name:
        return default
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else default


def _open_log_file(log_file: Path) -> Optional[RotatingFileHandler]:
    try:
        ensure_data_dir(log_file.parent)
        return RotatingFileHandler(str(log_file), maxBytes=1_000_000, backupCount=5)
    except OSError as exc:
        logging.getLogger(__name__).warning("Cannot write log file %s (%s); logging to console only", log_file, exc)
        return None


def configure_logging(
    level: Optional[str] = None,
    *,
    console_level: Optional[str] = None,
    log_path: Optional[Path] = None,
) -> None:
    """Attach a rotating file handler and a console handler to the root logger.

    ``level`` governs the file and defaults to ``SCHEDULE_LOG_LEVEL``.
    ``console_level`` governs the terminal and defaults to
    ``SCHEDULE_CONSOLE_LOG_LEVEL``, then to ``level``. When the data
    directory is not writable only the console handler is installed.
    Calling this more than once has no effect.
    """

    global _INITIALIZED
    if _INITIALIZED:
        return

    settings = get_settings()
    file_level = _level_number(level or settings.log_level)
    terminal_level = _level_number(console_level or settings.console_log_level, default=file_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    root = logging.getLogger()
    root.setLevel(min(file_level, terminal_level))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(terminal_level)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    log_file = log_path or settings.storage.data_dir / "schedule_builder.log"
    file_handler = _open_log_file(log_file)
    if file_handler is not None:
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _INITIALIZED = True
    logging.getLogger(__name__).debug("Logging configured. Output file: %s", log_file if file_handler is not None else "none")


__all__ = ["configure_logging"]
