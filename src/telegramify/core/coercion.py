from typing import Any, Optional


def coerce_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """Best-effort int conversion; booleans and unparsable values give ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def coerce_positive_int(value: Any, default: int) -> int:
    """Return ``value`` as a positive int, or ``default`` when it is not one."""
    parsed = coerce_int(value)
    if parsed is None or parsed <= 0:
        return default
    return parsed
