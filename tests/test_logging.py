from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from schedule_builder import logging as app_logging
from schedule_builder.config import get_settings


@pytest.fixture
def root_logger(monkeypatch):
    monkeypatch.setattr(app_logging, "_INITIALIZED", False)
    root = logging.getLogger()
    level = root.level
    before = list(root.handlers)
    yield root
    for handler in [handler for handler in root.handlers if handler not in before]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)


def _added(root, before):
    return [handler for handler in root.handlers if handler not in before]


def test_file_and_console_levels_are_independent(root_logger, tmp_path):
    before = list(root_logger.handlers)
    log_file = tmp_path / "logs" / "app.log"
    app_logging.configure_logging("DEBUG", console_level="warning", log_path=log_file)

    added = _added(root_logger, before)
    file_handlers = [handler for handler in added if isinstance(handler, RotatingFileHandler)]
    console_handlers = [handler for handler in added if type(handler) is logging.StreamHandler]
    assert len(file_handlers) == 1
    assert len(console_handlers) == 1
    assert file_handlers[0].level == logging.DEBUG
    assert console_handlers[0].level == logging.WARNING
    assert root_logger.level == logging.DEBUG

    logging.getLogger("schedule_builder.tests").debug("written to file only")
    file_handlers[0].flush()
    assert "written to file only" in log_file.read_text()


def test_console_level_comes_from_environment(root_logger, tmp_path, monkeypatch):
    monkeypatch.setenv("SCHEDULE_CONSOLE_LOG_LEVEL", "error")
    get_settings.cache_clear()
    before = list(root_logger.handlers)
    app_logging.configure_logging(log_path=tmp_path / "app.log")

    levels = {type(handler): handler.level for handler in _added(root_logger, before)}
    assert levels[logging.StreamHandler] == logging.ERROR
    assert levels[RotatingFileHandler] == logging.INFO
    assert root_logger.level == logging.INFO


def test_unwritable_log_directory_falls_back_to_console(root_logger, tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    before = list(root_logger.handlers)

    app_logging.configure_logging("INFO", log_path=blocker / "logs" / "app.log")

    added = _added(root_logger, before)
    assert not any(isinstance(handler, RotatingFileHandler) for handler in added)
    assert [type(handler) for handler in added] == [logging.StreamHandler]
    assert "logging to console only" in caplog.text


def test_configure_logging_runs_once(root_logger, tmp_path):
    before = list(root_logger.handlers)
    app_logging.configure_logging(log_path=tmp_path / "app.log")
    app_logging.configure_logging(log_path=tmp_path / "other.log")
    assert len(_added(root_logger, before)) == 2
    assert not (tmp_path / "other.log").exists()
