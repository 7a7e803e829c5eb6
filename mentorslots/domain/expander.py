"""
Core business logic for expanding availability rules into concrete slots.

Pure domain logic: no storage, no network, no logging. Callers load the
rules, pick the window, and instrument the call themselves.
"""

from datetime import datetime, timedelta
from typing import Iterable, Iterator, List

import pendulum
from pendulum import DateTime

from .models import AvailabilityRule, ExpandedSlot, RecurringPattern
from .recurrence import DAILY_DAY_LIMIT, OCCURRENCE_GENERATORS


def _as_pendulum(value: datetime) -> DateTime:
    if isinstance(value, DateTime):
        return value
    return pendulum.instance(value)


class RecurrenceExpander:
    """
    Materializes the bookable instances of availability rules in a window.

    Algorithm:
    1. Non-recurring rules pass through if they start inside the window
    2. Recurring rules ask their pattern's generator for candidate starts
    3. Candidates past the rule's end date stop that rule
    4. Candidates outside ``[window_start, window_end)`` are dropped
    5. All instances are sorted by start time
    """

    def __init__(self, daily_day_limit: int = DAILY_DAY_LIMIT):
        self.daily_day_limit = daily_day_limit

    def expand(
        self,
        rules: Iterable[AvailabilityRule],
        window_start: datetime,
        window_end: datetime,
    ) -> List[ExpandedSlot]:
        """
        Expand all rules into the slots that start within the window.

        Args:
            rules: Availability rules, in any order
            window_start: Inclusive start of the query window
            window_end: Exclusive end of the query window

        Returns:
            ExpandedSlot objects sorted by start time. Empty for an empty or
            inverted window.
        """
        start = _as_pendulum(window_start)
        end = _as_pendulum(window_end)

        if start >= end:
            return []

        expanded: List[ExpandedSlot] = []
        for rule in rules:
            try:
                expanded.extend(list(self._expand_rule(rule, start, end)))
            except (TypeError, ValueError, OverflowError):
                # Malformed rule data contributes nothing; the batch goes on
                continue

        return sorted(expanded, key=lambda slot: slot.start_time)

    def _expand_rule(
        self,
        rule: AvailabilityRule,
        window_start: DateTime,
        window_end: DateTime,
    ) -> Iterator[ExpandedSlot]:
        if not rule.is_recurring:
            if window_start <= rule.start_time < window_end:
                yield ExpandedSlot(
                    original_slot_id=rule.id,
                    start_time=rule.start_time,
                    end_time=rule.end_time,
                    duration_minutes=rule.duration_minutes,
                    is_recurring=False,
                    recurring_pattern=None,
                )
            return

        pattern = rule.recurring_pattern
        if isinstance(pattern, RecurringPattern):
            pattern = pattern.value
        generator = OCCURRENCE_GENERATORS.get(pattern) if isinstance(pattern, str) else None
        if generator is None:
            # Unknown or missing pattern: nothing to expand
            return

        options = {}
        if pattern == RecurringPattern.DAILY.value:
            options["day_limit"] = self.daily_day_limit

        candidates = generator(rule.start_time, window_start, window_end, **options)
        last_date = rule.last_occurrence_date
        length = timedelta(seconds=(rule.end_time - rule.start_time).total_seconds())

        for candidate in candidates:
            if last_date is not None and candidate.date() > last_date:
                break
            if not window_start <= candidate < window_end:
                continue

            yield ExpandedSlot(
                original_slot_id=rule.id,
                start_time=candidate,
                end_time=candidate + length,
                duration_minutes=rule.duration_minutes,
                is_recurring=True,
                recurring_pattern=pattern,
            )


def expand_recurring_slots(
    rules: Iterable[AvailabilityRule],
    window_start: datetime,
    window_end: datetime,
) -> List[ExpandedSlot]:
    """Expand ``rules`` over ``[window_start, window_end)`` with default limits."""
    return RecurrenceExpander().expand(rules, window_start, window_end)
