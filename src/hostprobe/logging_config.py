"""
Logging configuration for hostprobe.

Provides structured logging with rotation, plus a logging sink that
records diagnostic outcomes without ever failing the diagnostic itself.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any


LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class StructuredFormatter(logging.Formatter):
    """Structured JSON-like formatter for easier log parsing."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with structured data."""
        if not hasattr(record, 'module_name'):
            record.module_name = record.module
        if not hasattr(record, 'function_name'):
            record.function_name = record.funcName

        return super().format(record)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_dir: str | None = None,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
    enable_console: bool = True,
    enable_file: bool = False,
    console_level: str | None = None,
) -> logging.Logger:
    """
    Set up logging for hostprobe.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Custom log file path (overrides log_dir)
        log_dir: Directory for log files (defaults to ~/.hostprobe/logs)
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup log files to keep
        enable_console: Enable console logging
        enable_file: Enable file logging
        console_level: Console threshold (defaults to level)

    Returns:
        Configured package logger
    """
    logger = logging.getLogger("hostprobe")
    logger.setLevel(getattr(logging, level.upper()))

    logger.handlers.clear()

    console_fmt = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_fmt = StructuredFormatter(
        fmt='%(asctime)s | %(levelname)-8s | %(name)-20s | %(module_name)-15s | '
            '%(function_name)-20s | %(lineno)-4d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if enable_console:
        # stderr keeps --json output on stdout clean
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, (console_level or level).upper()))
        console_handler.setFormatter(console_fmt)
        logger.addHandler(console_handler)

    if enable_file:
        if log_file:
            log_path = Path(log_file)
        elif log_dir:
            log_path = Path(log_dir) / "hostprobe.log"
        else:
            log_path = Path.home() / ".hostprobe" / "logs" / "hostprobe.log"

        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_fmt)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (e.g., 'hostprobe.recon.scanner')

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def configure_logging(debug: bool = False, log_file: str | None = None) -> None:
    """
    Quick logging configuration.

    Args:
        debug: Enable debug logging
        log_file: Also write a rotating log file at this path
    """
    if debug:
        level = "DEBUG"
    elif log_file:
        level = "INFO"
    else:
        level = "WARNING"
    setup_logging(
        level=level,
        log_file=log_file,
        enable_console=True,
        enable_file=log_file is not None,
        console_level="DEBUG" if debug else "WARNING",
    )


def _handler_chain(logger: logging.Logger):
    """Yield the handlers a record from logger would reach."""
    current = logger
    while current is not None:
        yield from getattr(current, "handlers", ())
        if not getattr(current, "propagate", False):
            break
        current = getattr(current, "parent", None)


def _watch_handler(handler: logging.Handler) -> None:
    """Make handler failures visible on the failing record."""
    if getattr(handler, "_hostprobe_watched", False):
        return
    original = handler.handleError

    def handle_error(record: logging.LogRecord) -> None:
        status = getattr(record, "sink_status", None)
        if status is not None:
            status["failed"] = True
        original(record)

    handler.handleError = handle_error
    handler._hostprobe_watched = True


class LogSink:
    """Records diagnostic outcomes as log lines.

    Writes never raise: a failing handler makes write() return False so
    logging problems cannot change a diagnostic's outcome. Handlers
    swallow their own emit errors through handleError, so the sink
    hooks that method on every handler the record reaches.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or get_logger("hostprobe.outcomes")

    def write(self, level: str, message: str) -> bool:
        """Write one line at the given severity ('info', 'warning', ...)."""
        levelno = LEVELS.get(level.lower())
        if levelno is None:
            return False
        status = {"failed": False}
        try:
            for handler in _handler_chain(self.logger):
                _watch_handler(handler)
            self.logger.log(levelno, message, extra={"sink_status": status})
        except Exception:
            return False
        return not status["failed"]

    def record(self, result: Any) -> bool:
        """Record a result value as one line per tabular row."""
        from hostprobe.tabular import to_rows

        try:
            rows = to_rows(result)
        except TypeError:
            return self.write("info", repr(result))
        ok = True
        for row in rows:
            line = " ".join(f"{key}={value}" for key, value in row.items())
            ok = self.write("info", line) and ok
        return ok
