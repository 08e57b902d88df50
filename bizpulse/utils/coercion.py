"""
Lenient coercion of form-style input and stored timestamps.

Values arrive from the dashboard as strings, numbers or nothing at all.
Parsing reads the leading numeric prefix ("12 pcs" -> 12) and anything
that cannot be read falls back to zero.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Optional

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_float_or_none(value: Any) -> Optional[float]:
    """Parse the leading float of ``value``; None when there is none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    match = _FLOAT_PREFIX.match(str(value))
    if not match:
        return None
    number = float(match.group(1))
    return number if math.isfinite(number) else None


def parse_float(value: Any) -> float:
    """Parse a float, coercing absent or invalid input to 0.0."""
    if not value:
        return 0.0
    number = parse_float_or_none(value)
    return number if number is not None else 0.0


def parse_int(value: Any) -> int:
    """Parse an integer, truncating decimals and coercing invalid input to 0."""
    if not value or isinstance(value, bool):
        return 0
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, int):
        return value
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else 0


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO date or datetime; naive values are taken as UTC."""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def as_text(value: Any) -> Optional[str]:
    """Form text field as a string; None stays None."""
    return None if value is None else str(value)
