"""Logging configuration for ragraph.

Library modules only call logging.getLogger(__name__). Applications (and
the ragraph CLI) call configure_logging() once at startup.

Usage:
    from ragraph.core.logging_config import configure_logging

    configure_logging(level="DEBUG")

Environment Variables:
    RAGRAPH_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    RAGRAPH_LOG_FORMAT: Output format ("text" or "json")
    RAGRAPH_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TEXT_FORMAT_WITH_MS = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord has; anything else was passed via extra=
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "taskName"}
)

_configured = False


class JsonFormatter(logging.Formatter):
    """Format records as one JSON object per line.

    {"timestamp": "...", "level": "DEBUG", "logger": "ragraph.core.graph.graph",
     "message": "[20251228_143022_x7k] step_start: node=agent, step=1"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    include_ms: bool = True,
    force: bool = False,
) -> None:
    """Configure the root logger.

    Subsequent calls are ignored unless force=True. Arguments left as None
    fall back to the RAGRAPH_LOG_* environment variables.

    Args:
        level: Log level name. Defaults to RAGRAPH_LOG_LEVEL or "WARNING".
        format: "text" or "json". Defaults to RAGRAPH_LOG_FORMAT or "text".
        file_path: Also log to this file. Defaults to RAGRAPH_LOG_FILE.
        include_ms: Include milliseconds in text timestamps.
        force: Reconfigure even if already configured.

    Raises:
        ValueError: If the level name is unknown.
    """
    global _configured
    if _configured and not force:
        return

    level = level or os.environ.get("RAGRAPH_LOG_LEVEL", "WARNING")
    format = format or os.environ.get("RAGRAPH_LOG_FORMAT", "text")  # type: ignore[assignment]
    file_path = file_path or os.environ.get("RAGRAPH_LOG_FILE")

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        fmt = TEXT_FORMAT_WITH_MS if include_ms else TEXT_FORMAT
        formatter = logging.Formatter(fmt, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configured = True
