"""Console and file logging for the document studio.

Two files are written next to the console output:
- info.log: everything at INFO and above
- error.log: ERROR and above, including remote failures that had no fallback
"""

import logging
import sys
from pathlib import Path

from docstudio.core.config import Settings, get_settings

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent.parent / "logs"

DETAILED_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "openai")


def _file_handler(path: Path, level: int) -> logging.FileHandler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=DETAILED_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    log_dir: Path | None = None,
    settings: Settings | None = None,
) -> logging.Logger:
    """Install console and file handlers on the root logger.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Args:
        log_dir: Directory for info.log and error.log. Defaults to logs/
            in the project root.
        settings: Settings providing the log level. Defaults to the
            global settings.

    Returns:
        The configured root logger.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level, logging.INFO)

    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    root_logger.addHandler(_file_handler(log_dir / "info.log", logging.INFO))
    root_logger.addHandler(_file_handler(log_dir / "error.log", logging.ERROR))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.debug(f"Logging to {log_dir} at {settings.log_level}")
    return root_logger
