"""Run-scoped logging helpers for graph streaming.

Every stream() call gets a run id, and the driver logs its progress
through the helpers below so all lines share one shape:

    [<run_id>] action: key=value, key=value (duration)

Examples:
    [20251228_143022_x7k] stream_start: entry=classify, max_steps=10
    [20251228_143022_x7k] step_start: node=classify, step=1
    [20251228_143022_x7k] step_complete: node=classify, state=y (0.0s)
    [20251228_143022_x7k] stream_complete: steps=3 (0.1s)
"""

from __future__ import annotations

import logging
import random
import string
import time
from typing import Any


def generate_run_id() -> str:
    """Generate a unique run ID.

    Format: YYYYMMDD_HHMMSS_xxx (second precision plus a 3-char suffix).

    Returns:
        Run ID string like "20251228_143022_x7k"
    """
    timestamp = time.strftime("%Y%m%d_%H%M%S")
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=3))
    return f"{timestamp}_{suffix}"


def truncate(value: Any, max_length: int = 100) -> str:
    """Truncate a value for logging.

    Args:
        value: Value to truncate.
        max_length: Maximum length before truncation.

    Returns:
        Truncated string with length indicator if truncated.
    """
    s = str(value)
    if len(s) <= max_length:
        return s
    return f"{s[:max_length]}... ({len(s)} chars)"


def safe_repr(value: Any) -> Any:
    """Convert a state value to a JSON-safe representation."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [safe_repr(v) for v in value]
    if isinstance(value, dict):
        return {str(k): safe_repr(v) for k, v in value.items()}
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return safe_repr(to_dict())
    return str(value)


def _format(identifier: str, action: str, kwargs: dict[str, Any]) -> str:
    kv_pairs = ", ".join(f"{k}={truncate(v)}" for k, v in kwargs.items())
    return f"[{identifier}] {action}: {kv_pairs}" if kv_pairs else f"[{identifier}] {action}"


def log_start(logger: logging.Logger, identifier: str, action: str, **kwargs: Any) -> None:
    """Log a start event at DEBUG."""
    logger.debug(_format(identifier, action, kwargs))


def log_complete(
    logger: logging.Logger,
    identifier: str,
    action: str,
    duration_s: float,
    **kwargs: Any,
) -> None:
    """Log a completion event with its duration at DEBUG."""
    msg = _format(identifier, action, kwargs)
    if kwargs:
        logger.debug(f"{msg} ({duration_s:.1f}s)")
    else:
        logger.debug(f"{msg}: ({duration_s:.1f}s)")


def log_error(
    logger: logging.Logger,
    identifier: str,
    action: str,
    error: str | Exception,
    **kwargs: Any,
) -> None:
    """Log an error event at ERROR.

    Args:
        logger: Logger to use.
        identifier: Primary identifier (usually the run id).
        action: Action name (e.g., "step_failed", "stream_failed").
        error: Error message or exception.
        **kwargs: Additional key=value pairs to log.
    """
    kwargs["error"] = truncate(str(error), max_length=200)
    logger.error(_format(identifier, action, kwargs))
