"""
Calendar-facing helpers built on top of expanded slots.

These shape expander output the way the booking calendar shows it: one
week at a time, one column per day, fixed-length bookable sessions.
"""

from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, List, Tuple

import pendulum
from pendulum import DateTime

from .models import ExpandedSlot

SESSION_DURATION_MINUTES = 15


def week_window(
    reference: DateTime,
    week_starts_on: int = pendulum.MONDAY,
) -> Tuple[DateTime, DateTime]:
    """
    Get the half-open 7-day window containing ``reference``.

    Args:
        reference: Any moment inside the wanted week
        week_starts_on: First weekday of the week (0=Monday, 6=Sunday)

    Returns:
        (start, end) where start is midnight of the first day and end is
        exactly 7 days later
    """
    days_back = (reference.day_of_week - week_starts_on) % 7
    start = reference.start_of("day").subtract(days=days_back)
    return start, start.add(days=7)


def split_into_sessions(
    slots: Iterable[ExpandedSlot],
    session_minutes: int = SESSION_DURATION_MINUTES,
) -> List[ExpandedSlot]:
    """
    Cut expanded slots into consecutive bookable sessions.

    A trailing piece shorter than ``session_minutes`` is dropped.

    Example (15 min sessions):
    Slot: 09:00 - 09:40
    Result: [09:00-09:15, 09:15-09:30]
    """
    if session_minutes <= 0:
        raise ValueError(f"session_minutes must be greater than zero, got {session_minutes}")

    sessions: List[ExpandedSlot] = []

    for slot in slots:
        current = slot.start_time
        while True:
            following = current.add(minutes=session_minutes)
            if following > slot.end_time:
                break
            sessions.append(
                replace(
                    slot,
                    start_time=current,
                    end_time=following,
                    duration_minutes=session_minutes,
                )
            )
            current = following

    return sessions


def group_by_day(
    slots: Iterable[ExpandedSlot],
    timezone: str = "UTC",
) -> Dict[date, List[ExpandedSlot]]:
    """
    Group slots by the calendar day they start on in ``timezone``.

    Days appear in order of first occurrence, so sorted input gives
    chronologically ordered days.
    """
    days: Dict[date, List[ExpandedSlot]] = {}

    for slot in slots:
        day = slot.start_time.in_timezone(timezone).date()
        days.setdefault(day, []).append(slot)

    return days
