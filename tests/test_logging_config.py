"""Tests for logging setup."""

import logging
import os
import time

import pytest

from menu_icons.logging_config import DEFAULT_LOG_FILENAME, configure_logging, purge_rotated_logs


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_writes_file(tmp_path, restore_root_logger):
    log_file = configure_logging(tmp_path / "logs", 1024 * 1024, 5, debug=True)

    logging.getLogger("menu_icons.test").debug("hello from test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file == tmp_path / "logs" / DEFAULT_LOG_FILENAME
    assert "hello from test" in log_file.read_text(encoding="utf-8")
    assert logging.getLogger().level == logging.DEBUG


def test_purge_rotated_logs(tmp_path):
    log_file = tmp_path / DEFAULT_LOG_FILENAME
    log_file.write_text("active")
    old = tmp_path / f"{DEFAULT_LOG_FILENAME}.1"
    old.write_text("old")
    recent = tmp_path / f"{DEFAULT_LOG_FILENAME}.2"
    recent.write_text("recent")
    ten_days_ago = time.time() - 10 * 86400
    os.utime(old, (ten_days_ago, ten_days_ago))

    assert purge_rotated_logs(log_file, retention_days=5) == 1
    assert not old.exists()
    assert recent.exists()
    assert log_file.exists()
    assert purge_rotated_logs(log_file, retention_days=0) == 0
