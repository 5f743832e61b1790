"""Logging setup for sfv-verify.

Handlers are attached to the ``sfv_verify`` package logger, never to the
root logger, so an application embedding the verifier keeps its own
logging configuration.
"""

import logging
import logging.handlers
import json
import sys
from typing import Any, Dict, Type
from datetime import datetime, timezone
from pathlib import Path

from .config import LoggingConfig

PACKAGE_LOGGER = "sfv_verify"

# Marks handlers installed by setup_logging so a second call replaces them
_HANDLER_ATTR = "_sfv_verify_handler"


class StructuredFormatter(logging.Formatter):
    """JSON formatter, one object per line.

    Hashing threads are named ``crc32_N``, so the thread name is included to
    tell parallel workers apart.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "thread": record.threadName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


class DetailedFormatter(logging.Formatter):
    """Human-readable formatter with time, thread and source location."""

    def __init__(self) -> None:
        fmt = (
            "%(asctime)s | %(levelname)-8s | %(threadName)s | "
            "%(name)s:%(lineno)d | %(message)s"
        )
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")


class SimpleFormatter(logging.Formatter):
    """Console formatter: level and message."""

    def __init__(self) -> None:
        super().__init__(fmt="%(levelname)-8s | %(message)s")


FORMATTERS: Dict[str, Type[logging.Formatter]] = {
    "simple": SimpleFormatter,
    "detailed": DetailedFormatter,
    "json": StructuredFormatter,
}


def _install(logger: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_ATTR, True)
    logger.addHandler(handler)


def setup_logging(
    config: LoggingConfig,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure the sfv_verify package logger from the logging config.

    Console output goes to stderr in the configured format; stdout is kept
    for the verification report. When ``config.file`` is set, records are
    also written there as JSON with size-based rotation.

    Args:
        config: Logging settings (level, format, optional file)
        max_file_size_mb: Max log file size in MB before rotation
        backup_count: Number of rotated files to keep

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(config.level)

    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_ATTR, False)]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(FORMATTERS[config.format]())
    _install(logger, console_handler)

    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter())
        _install(logger, file_handler)

    # Root handlers must not emit these records a second time
    logger.propagate = False
    return logger


class LogContext:
    """Context manager adding structured fields to records of one logger tree.

    Only records whose logger is ``logger`` or one of its children get the
    fields, so a command context does not leak into other libraries' logs.
    """

    def __init__(self, logger: logging.Logger, **fields: Any) -> None:
        self.logger = logger
        self.fields = fields
        self.old_factory = None

    def _applies_to(self, name: str) -> bool:
        prefix = self.logger.name
        return name == prefix or name.startswith(prefix + ".")

    def __enter__(self) -> "LogContext":
        self.old_factory = logging.getLogRecordFactory()

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = self.old_factory(*args, **kwargs)
            if self._applies_to(record.name):
                if not hasattr(record, "extra_fields"):
                    record.extra_fields = {}
                record.extra_fields.update(self.fields)
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        logging.setLogRecordFactory(self.old_factory)
