"""Shared helpers for phone numbers, clock times and rounding."""

import math
import re
from datetime import datetime, time

from scheduling_engine.errors import InputError


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("0412 345 678")
        '0412345678'
        >>> normalize_phone("+61 (412) 345-678")
        '+61412345678'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def parse_clock(value: str) -> time:
    """Parse an ``HH:MM`` string into a ``time``."""
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except ValueError:
        raise InputError(f"Invalid clock time {value!r}, expected HH:MM") from None


def at_clock(day: datetime, value: str) -> datetime:
    """Combine the date of ``day`` with an ``HH:MM`` clock time."""
    clock = parse_clock(value)
    return day.replace(hour=clock.hour, minute=clock.minute, second=0, microsecond=0)


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positive values, like a till would."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
