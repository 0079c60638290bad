from __future__ import annotations

from ..core.exceptions import MalformedTimeError


def require_hour(value: int) -> int:
    hour = int(value)
    if hour < 0 or hour > 23:
        raise MalformedTimeError(f"Hour must be between 0 and 23, got {hour}")
    return hour


def require_minute(value: int) -> int:
    minute = int(value)
    if minute < 0 or minute > 59:
        raise MalformedTimeError(f"Minute must be between 0 and 59, got {minute}")
    return minute
