"""Logging setup for the note command.

The editor owns the terminal, so log records go to a rotating file and
never to stdout or stderr. Library use of the package logs nothing until
setup_logging() attaches a handler.
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

import platformdirs

LOG_FILENAME = "note.log"
LOG_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"

logger = logging.getLogger("note")


def default_log_file() -> Path:
    return Path(platformdirs.user_log_dir("note")) / LOG_FILENAME


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> Optional[Path]:
    """Attach a rotating file handler to the 'note' logger.

    Args:
        level: Level name such as "DEBUG" or "info"; unknown names mean WARNING
        log_file: Target file, defaulting to the user log directory

    Returns:
        The file being written, or None if no handler could be created
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    path = Path(log_file) if log_file else default_log_file()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Error creating log directory '{path.parent}': {e}", file=sys.stderr)
        path = Path(tempfile.gettempdir()) / LOG_FILENAME

    try:
        handler = logging.handlers.RotatingFileHandler(
            os.fspath(path), maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
    except OSError as e:
        print(f"Error setting up log file '{path}': {e}", file=sys.stderr)
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(log_level)

    # Replace handlers from an earlier call instead of duplicating them
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.debug(f"Logging to {path} at {logging.getLevelName(log_level)}")
    return path
