"""Logging setup for the review pipeline.

Handlers hang off the ``ue5qgen`` package logger and never touch the root
logger. Records go to stderr and to ``LoggingConfig.file_path()``, either as
plain text or as one JSON object per line.
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime, timezone
from logging import Logger
from typing import Optional

from ..config import LoggingConfig

PACKAGE_LOGGER = "ue5qgen"

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Extra record attributes copied into the JSON payload when present
_EXTRA_FIELDS = ("app_mode", "discipline", "difficulty", "language", "counts", "quota", "duration_ms")


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, with review context fields when set."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_obj[name] = getattr(record, name)
        if record.exc_info:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }
        return json.dumps(log_obj, default=str)


class SessionContextFilter(logging.Filter):
    """Stamp the active app mode on records that do not carry one."""

    def __init__(self, app_mode: Optional[str] = None):
        super().__init__()
        self.app_mode = app_mode

    def filter(self, record: logging.LogRecord) -> bool:
        if self.app_mode and not hasattr(record, "app_mode"):
            record.app_mode = self.app_mode
        return True


def _owned(handler: logging.Handler) -> bool:
    return getattr(handler, "_ue5qgen", False)


def setup_logging(
    config: Optional[LoggingConfig] = None,
    structured: bool = False,
    app_mode: Optional[str] = None,
) -> Logger:
    """Attach console and file handlers to the package logger.

    A repeat call replaces the handlers installed by the previous one, so the
    format or destination can change without duplicated output.
    """
    config = config or LoggingConfig()
    level = getattr(logging, config.level.upper(), logging.INFO)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in [h for h in logger.handlers if _owned(h)]:
        logger.removeHandler(handler)
        handler.close()

    log_path = config.file_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    formatter = StructuredFormatter() if structured else logging.Formatter(TEXT_FORMAT, DATE_FORMAT)

    for handler in (logging.StreamHandler(), logging.FileHandler(str(log_path), encoding="utf-8")):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        if app_mode:
            handler.addFilter(SessionContextFilter(app_mode))
        handler._ue5qgen = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    logger.debug("Logging configured (%s)", "json" if structured else "text")
    return logger
