"""
Date, shift-duration and relative-time helpers for report screens.
"""
from __future__ import annotations

import datetime


def format_date(value: datetime.date | datetime.datetime | str) -> str:
    """``2025-03-07 -> "07/03/2025"``.  ISO strings are accepted."""
    if isinstance(value, str):
        value = datetime.date.fromisoformat(value[:10])
    return value.strftime("%d/%m/%Y")


def calculate_duration(start_time: str, end_time: str) -> tuple[int, int]:
    """Hours and minutes between two ``HH:MM`` times, wrapping past midnight.

    Missing or malformed times give ``(0, 0)``.
    """
    if not start_time or not end_time:
        return 0, 0
    try:
        sh, sm = (int(p) for p in start_time.split(":")[:2])
        eh, em = (int(p) for p in end_time.split(":")[:2])
    except ValueError:
        return 0, 0
    total = (eh * 60 + em) - (sh * 60 + sm)
    if total < 0:
        total += 24 * 60
    return divmod(total, 60)


def format_duration(hours: int, minutes: int) -> str:
    """``(2, 5) -> "2h 5m"``; ``(0, 45) -> "45m"``."""
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_time_since(moment: datetime.datetime, now: datetime.datetime | None = None) -> str:
    """Coarse relative age: ``"2y ago"``, ``"3mo ago"``, ``"5d ago"``, ``"4h ago"``, ``"10m ago"``, ``"30s ago"``."""
    if now is None:
        now = datetime.datetime.now(moment.tzinfo)
    seconds = int((now - moment).total_seconds())
    for unit_seconds, suffix in (
        (31_536_000, "y"),
        (2_592_000, "mo"),
        (86_400, "d"),
        (3_600, "h"),
        (60, "m"),
    ):
        if seconds / unit_seconds > 1:
            return f"{seconds // unit_seconds}{suffix} ago"
    return f"{seconds}s ago"
