from __future__ import annotations

import logging
import os
from pathlib import Path


DEBUG_LOGGER_NAME = "hotspots.debug"
DEBUG_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_RECORD_ATTRIBUTES = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class EventFormatter(logging.Formatter):
    """Appends the ``extra={...}`` payload of an event as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        payload = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        }
        if not payload:
            return line
        details = " ".join(f"{key}={value}" for key, value in sorted(payload.items()))
        return f"{line} | {details}"


def configure_console_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )


def setup_debug_logging(
    base_dir: Path | str,
    *,
    level: int = logging.DEBUG,
    filename: str = "debug.log",
) -> logging.Logger:
    """
    Send the ``hotspots.debug.*`` event loggers to ``<base_dir>/logs/<filename>``.

    The debug tree does not propagate to the console. Calling this again for
    the same file does not add a second handler.
    """
    log_path = Path(base_dir) / "logs" / filename
    logger = logging.getLogger(DEBUG_LOGGER_NAME)

    target = os.path.abspath(log_path)
    attached = any(
        isinstance(handler, logging.FileHandler) and handler.baseFilename == target
        for handler in logger.handlers
    )
    if not attached:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(EventFormatter(DEBUG_LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger
