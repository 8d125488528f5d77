"""Lenient number/timestamp parsing for upstream payloads."""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_int(value: Any, default: int = 0) -> int:
    """Parse an integer the way the storefront UI does (leading digits, else default).

    ``"12"`` -> 12, ``"12 uds"`` -> 12, ``7.9`` -> 7, ``"abc"``/``None`` -> default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return default
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return default


def coerce_float(value: Any) -> float | None:
    """Return a finite float or None for anything that is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_datetime(value: Any) -> datetime | None:
    """Parse ISO-8601 strings (``Z`` suffix included); garbage becomes None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def coerce_deleted_at(value: Any) -> datetime | None:
    """Soft-delete marker: any non-empty value counts as deleted, even if unparseable."""
    parsed = coerce_datetime(value)
    if parsed is not None:
        return parsed
    if value is None or value is False or (isinstance(value, str) and not value.strip()):
        return None
    return datetime.fromtimestamp(0, tz=timezone.utc)


def timestamp_or_min(value: datetime | None) -> float:
    """Sort key for timestamps; missing values sort as the oldest."""
    if value is None:
        return float("-inf")
    return value.timestamp()


def coerce_bool(value: Any, default: bool) -> bool:
    """``None`` keeps ``default``; strings count as true only when they read ``"true"``."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)
