"""Logging configuration for the admin server."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path


DEFAULT_LOG_FILENAME = "menu-icons.log"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

ANSI_RESET = "\x1b[0m"
ANSI_COLORS = {
    logging.DEBUG: "\x1b[36m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[35m",
}


class ColorFormatter(logging.Formatter):
    """Formatter that colors the level name on TTY streams."""

    def __init__(self, fmt: str, use_color: bool = True) -> None:
        super().__init__(fmt)
        self._use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        color = ANSI_COLORS.get(record.levelno) if self._use_color else None
        if color:
            record.levelname = f"{color}{levelname}{ANSI_RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def purge_rotated_logs(log_file: Path, retention_days: int) -> int:
    """Delete rotated copies of ``log_file`` older than the retention window.

    Args:
        log_file: Active log file; it is never removed.
        retention_days: Days to keep rotated files. ``0`` keeps everything.

    Returns:
        Number of files removed.
    """
    if retention_days <= 0:
        return 0

    cutoff = datetime.now(timezone.utc) - timedelta(days=retention_days)
    removed = 0
    for path in log_file.parent.glob(f"{log_file.name}.*"):
        try:
            mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
            if mtime < cutoff:
                path.unlink()
                removed += 1
        except OSError:
            continue
    return removed


def configure_logging(
    log_dir: Path,
    log_max_bytes: int,
    log_retention_days: int,
    debug: bool,
    uvicorn_log_level: str = "info",
) -> Path:
    """Send application logs to a rotating file and to stderr.

    Args:
        log_dir: Directory for log files.
        log_max_bytes: Size at which the log file rotates.
        log_retention_days: Days to keep rotated files.
        debug: Enable debug-level logging.
        uvicorn_log_level: Level applied to the uvicorn loggers.

    Returns:
        Path of the active log file.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / DEFAULT_LOG_FILENAME
    level = logging.DEBUG if debug else logging.INFO

    file_handler = RotatingFileHandler(
        log_file, maxBytes=log_max_bytes, backupCount=20, encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    file_handler.setLevel(level)

    stream_handler = logging.StreamHandler()
    use_color = bool(getattr(stream_handler.stream, "isatty", lambda: False)())
    stream_handler.setFormatter(ColorFormatter(LOG_FORMAT, use_color=use_color))
    stream_handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(file_handler)
    root_logger.addHandler(stream_handler)

    quiet_level = logging.INFO if debug else logging.WARNING
    for logger_name in ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite"):
        logging.getLogger(logger_name).setLevel(quiet_level)

    uvicorn_level = getattr(logging, uvicorn_log_level.upper(), logging.INFO)
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(logger_name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
        uvicorn_logger.setLevel(uvicorn_level)

    removed = purge_rotated_logs(log_file, log_retention_days)
    if removed:
        logging.getLogger(__name__).info(
            "Purged %s old log files from %s", removed, log_dir
        )

    return log_file
