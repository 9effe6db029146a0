from __future__ import annotations

import json
import logging
from typing import Any, Optional


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    *,
    exc: Optional[BaseException] = None,
    **fields: Any,
) -> None:
    """Emit a single structured log record as a JSON object."""
    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {"event": event}
    for key, value in fields.items():
        if value is not None:
            payload[key] = value
    if exc is not None:
        payload["error_type"] = type(exc).__name__
        payload["error"] = str(exc)
    try:
        message = json.dumps(payload, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        message = f"{event} {fields!r}"
    logger.log(level, message, exc_info=exc if level >= logging.ERROR else None)
