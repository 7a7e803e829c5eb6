"""
Candidate occurrence generators for recurring availability rules.

Each generator answers only "which start times does this pattern produce
around the query window". Whether a candidate is kept (window containment,
the rule's own end date) is decided by the expander.
"""

from typing import Callable, Dict, Iterator

from pendulum import DateTime

from .models import RecurringPattern

DAILY_DAY_LIMIT = 100

OccurrenceGenerator = Callable[..., Iterator[DateTime]]


def _at_anchor_time(day: DateTime, anchor: DateTime) -> DateTime:
    """Place the anchor's time-of-day on the given day."""
    return day.set(
        hour=anchor.hour,
        minute=anchor.minute,
        second=anchor.second,
        microsecond=anchor.microsecond,
    )


def daily_occurrences(
    anchor: DateTime,
    window_start: DateTime,
    window_end: DateTime,
    day_limit: int = DAILY_DAY_LIMIT,
) -> Iterator[DateTime]:
    """
    Yield one start per calendar day, walking from the start of the window.

    Walking never begins before the anchor's own day and stops after
    ``day_limit`` days even if the window is longer.
    """
    tz = anchor.tzinfo
    current = max(
        window_start.in_timezone(tz).start_of("day"),
        anchor.start_of("day"),
    )

    walked = 0
    while current < window_end and walked < day_limit:
        walked += 1
        yield _at_anchor_time(current, anchor)
        current = current.add(days=1)


def weekly_occurrences(
    anchor: DateTime,
    window_start: DateTime,
    window_end: DateTime,
) -> Iterator[DateTime]:
    """
    Yield starts on the anchor's weekday, one week apart.

    An anchor before the window is advanced in whole weeks to the first
    occurrence at or after ``window_start``. Weeks are counted on the
    anchor's wall clock, so the jump rounds down and steps forward from there.
    """
    current = anchor
    if anchor < window_start:
        current = anchor.add(weeks=anchor.diff(window_start).in_weeks())
        while current < window_start:
            current = current.add(weeks=1)

    while current < window_end:
        yield current
        current = current.add(weeks=1)


def add_months_clamped(anchor: DateTime, months: int) -> DateTime:
    """
    Move ``anchor`` forward by whole months, keeping its day-of-month.

    When the target month is too short (day 31 in April, day 30 in
    February), the last day of that month is used instead of overflowing
    into the next one.
    """
    return anchor.add(months=months)


def monthly_occurrences(
    anchor: DateTime,
    window_start: DateTime,
    window_end: DateTime,
) -> Iterator[DateTime]:
    """
    Yield starts on the anchor's day-of-month, one month apart.

    Every candidate is computed from the anchor itself, so a clamp in a
    short month never shifts the following months.
    """
    offset = 0
    if anchor < window_start:
        start = window_start.in_timezone(anchor.tzinfo)
        offset = max(0, (start.year - anchor.year) * 12 + start.month - anchor.month - 1)
        while add_months_clamped(anchor, offset) < window_start:
            offset += 1

    current = add_months_clamped(anchor, offset)
    while current < window_end:
        yield current
        offset += 1
        current = add_months_clamped(anchor, offset)


OCCURRENCE_GENERATORS: Dict[str, OccurrenceGenerator] = {
    RecurringPattern.DAILY.value: daily_occurrences,
    RecurringPattern.WEEKLY.value: weekly_occurrences,
    RecurringPattern.MONTHLY.value: monthly_occurrences,
}
