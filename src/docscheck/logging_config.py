"""Logging setup for the docscheck commands.

Crawl progress is reported through logging, so the console shows the bare
message. The optional log file gets timestamps and logger names.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty below WARNING during a browser crawl
QUIET_LOGGERS = ("asyncio", "playwright")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> None:
    """Configure the root logger for a docscheck run.

    Args:
        level: Level name; unknown names fall back to INFO
        log_file: Also write records here (parent directories are created)
        format_string: Console format, defaults to the bare message
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(format_string or CONSOLE_FORMAT))
    handlers: List[logging.Handler] = [console]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
