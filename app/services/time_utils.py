"""Minute-of-day helpers shared by every conflict check.

All times are minutes since midnight. Ranges are half-open: a class ending at
17:00 and another starting at 17:00 do not overlap.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.domain.models import Weekday

DAY_LABELS_FULL: dict[Weekday, str] = {
    Weekday.MON: "Monday",
    Weekday.TUE: "Tuesday",
    Weekday.WED: "Wednesday",
    Weekday.THU: "Thursday",
    Weekday.FRI: "Friday",
    Weekday.SAT: "Saturday",
    Weekday.SUN: "Sunday",
}

DAY_SHORT: dict[Weekday, str] = {day: label[:3] for day, label in DAY_LABELS_FULL.items()}


def _to_int(part: str) -> int:
    try:
        return int(part)
    except ValueError:
        return 0


def time_to_minutes(hhmm: str) -> int:
    """Convert ``"HH:MM"`` to minutes since midnight.

    Missing or non-numeric components count as 0, so ``"9"`` is 540 and
    ``""`` is 0. Never raises.
    """
    parts = (hhmm or "").split(":")
    hours = _to_int(parts[0])
    minutes = _to_int(parts[1]) if len(parts) > 1 else 0
    return hours * 60 + minutes


def time_ranges_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Strict overlap: touching endpoints (back-to-back) do not count."""
    return start_a < end_b and start_b < end_a


def overlap_minutes(start_a: int, end_a: int, start_b: int, end_b: int) -> int:
    return max(0, min(end_a, end_b) - max(start_a, start_b))


def minutes_to_time(mins: int) -> str:
    """Format minutes since midnight as ``"h:mm AM/PM"``."""
    hours, minutes = divmod(mins, 60)
    suffix = "PM" if hours >= 12 else "AM"
    hour = hours % 12 or 12
    return f"{hour}:{minutes:02d} {suffix}"


def split_slot_time(slot: str | None) -> tuple[str, str] | None:
    """Split a ``"HH:MM-HH:MM"`` slot string into its start and end parts.

    Returns ``None`` when either side is missing.
    """
    parts = (slot or "").split("-")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


def format_duration(minutes: int) -> str:
    if minutes >= 60:
        hours = minutes // 60
        return f"{hours} hour{'s' if hours > 1 else ''}"
    return f"{minutes} minutes"


def format_days(days: Iterable[Weekday]) -> str:
    return ", ".join(DAY_LABELS_FULL[day] for day in days)
