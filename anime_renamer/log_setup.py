# anime_renamer/log_setup.py
import logging
import sys
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, Union

LOGGER_NAME = "anime_renamer"

CONSOLE_FORMAT = '%(levelname)-8s: %(message)s'
DETAILED_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s:%(lineno)d] %(message)s'


def _make_console_handler(level: int) -> logging.Handler:
    fmt = DETAILED_FORMAT if level <= logging.DEBUG else CONSOLE_FORMAT
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt='%H:%M:%S'))
    return handler


def _make_file_handler(log_file: Union[str, Path]) -> logging.Handler:
    path = Path(log_file).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode='a', encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S%z'))
    return handler


def setup_logging(log_level_console: int = logging.INFO, log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Configures the package logger and returns it.

    Handlers from a previous call are closed and replaced. The optional log
    file always records DEBUG; a file that cannot be opened is reported on
    the console and otherwise ignored.
    """
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(logging.DEBUG)
    for old_handler in list(log.handlers):
        log.removeHandler(old_handler)
        old_handler.close()

    log.addHandler(_make_console_handler(log_level_console))

    if not log_file:
        return log

    try:
        log.addHandler(_make_file_handler(log_file))
    except OSError as e:
        log.error(f"Failed to configure file logging to '{log_file}': {e}")
        return log

    log.info(f"--- Log session started: {datetime.now(timezone.utc).isoformat()} ---")
    log.info(f"Command: {' '.join(sys.argv)}")
    return log


def parse_log_level(level_name: Optional[str], default: int = logging.INFO) -> int:
    """Maps 'DEBUG'/'info'/... to a logging level, falling back to ``default``."""
    if not level_name:
        return default
    level = logging.getLevelName(str(level_name).upper())
    return level if isinstance(level, int) else default
