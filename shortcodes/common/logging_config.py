"""Logging configuration for the short code service.

The service logs under two namespaces: ``shortcodes`` for the engine and
stores, ``web_app`` for routes and request logging. Both share one set of
handlers so a single LOG_FILE collects everything.
"""

import json
import logging
import sys
from typing import Optional, Sequence

LOGGER_NAMESPACES = ("shortcodes", "web_app")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class JsonLineFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, TEXT_DATEFMT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _build_handlers(
    numeric_level: int,
    log_file: Optional[str],
    formatter: logging.Formatter,
) -> list:
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    namespaces: Sequence[str] = LOGGER_NAMESPACES,
) -> logging.Logger:
    """Setup logging for the service namespaces.

    Calling this again replaces the handlers installed by a previous call.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional log file path, written alongside stdout
        json_format: Emit one JSON object per line instead of text
        namespaces: Logger namespaces to configure; the first is returned

    Returns:
        The logger for the first namespace
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = JsonLineFormatter() if json_format else logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)

    handlers = _build_handlers(numeric_level, log_file, formatter)

    for name in namespaces:
        namespace_logger = logging.getLogger(name)
        for old_handler in namespace_logger.handlers:
            old_handler.close()
        namespace_logger.handlers.clear()
        namespace_logger.setLevel(numeric_level)
        for handler in handlers:
            namespace_logger.addHandler(handler)

    return logging.getLogger(namespaces[0])
