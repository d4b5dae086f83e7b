# compose_bom/A_core/A00_logging.py
"""
Logging setup for compose_bom.

Every module logs through a child of the "compose_bom" logger, so one call
to configure_logging() at startup (CLI or server) decides where output
goes: colored stderr, an optional rotating file per run, or both.

Provides:
- get_logger(name): logger under the package namespace
- configure_logging(...): install console/file handlers
- LogContext: start/finish/failure lines with elapsed time
- timed: decorator variant of LogContext at DEBUG

Usage:
    from compose_bom.A_core.A00_logging import LogContext, get_logger

    logger = get_logger(__name__)

    with LogContext(logger, "BOM extraction"):
        orchestrator.extract()
"""

from __future__ import annotations

import functools
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, TypeVar, Union

F = TypeVar("F", bound=Callable[..., Any])

ROOT_LOGGER_NAME = "compose_bom"

CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_MAX_BYTES = 2 * 1024 * 1024
LOG_FILE_BACKUPS = 5

LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}
RESET = "\033[0m"

_run_id: Optional[str] = None


class ColoredFormatter(logging.Formatter):
    """Colors the level name when stderr is a terminal."""

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)
        # File handlers share the record; color a copy
        colored = logging.makeLogRecord(record.__dict__)
        color = LEVEL_COLORS.get(record.levelno, "")
        colored.levelname = f"{color}{record.levelname}{RESET}"
        return super().format(colored)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, DATE_FORMAT))
    return handler


def _file_handler(log_dir: Path, run_id: str, level: int) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / f"compose_bom_{run_id}.log",
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
    return handler


def configure_logging(
    log_dir: Optional[Union[str, Path]] = None,
    log_level: int = logging.INFO,
    run_id: Optional[str] = None,
    enable_file_logging: bool = False,
    enable_console_logging: bool = True,
) -> None:
    """
    Replace the package handlers.

    Safe to call more than once; each call starts from a clean handler list.

    Args:
        log_dir: Directory for the run's log file (default: ./logs).
        log_level: Minimum level for every handler.
        run_id: Log file suffix (default: current timestamp).
        enable_file_logging: Write a rotating log file.
        enable_console_logging: Write to stderr.
    """
    global _run_id
    _run_id = run_id or datetime.now().strftime("%Y%m%d_%H%M%S")

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(log_level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if enable_console_logging:
        package_logger.addHandler(_console_handler(log_level))
    if enable_file_logging:
        package_logger.addHandler(_file_handler(Path(log_dir or "logs"), _run_id, log_level))


def current_run_id() -> Optional[str]:
    """Run id chosen by the last configure_logging() call."""
    return _run_id


def get_logger(name: str) -> logging.Logger:
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


@contextmanager
def LogContext(logger: logging.Logger, operation: str, level: int = logging.INFO) -> Iterator[None]:
    """
    Log "Starting:", then "Completed: ... (1.20s)" or "Failed: ..." and re-raise.

    Example:
        >>> with LogContext(logger, "BOM extraction"):
        ...     orchestrator.extract()
    """
    started = time.perf_counter()
    logger.log(level, f"Starting: {operation}")
    try:
        yield
    except Exception as e:
        logger.error(f"Failed: {operation} ({time.perf_counter() - started:.2f}s) - {type(e).__name__}: {e}")
        raise
    logger.log(level, f"Completed: {operation} ({time.perf_counter() - started:.2f}s)")


def timed(logger: Optional[logging.Logger] = None, level: int = logging.DEBUG) -> Callable[[F], F]:
    """Log how long each call of the decorated function takes."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log = logger or get_logger(func.__module__)
            started = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                log.log(level, f"{func.__qualname__} completed in {time.perf_counter() - started:.2f}s")

        return wrapper  # type: ignore[return-value]

    return decorator


DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR
