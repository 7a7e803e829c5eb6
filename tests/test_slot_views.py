"""
Tests for calendar-facing slot helpers.
"""

import pendulum
import pytest

from mentorslots.domain.models import ExpandedSlot
from mentorslots.domain.slot_views import group_by_day, split_into_sessions, week_window


def utc(text: str):
    return pendulum.parse(text, tz="UTC")


def slot(start: str, end: str, rule_id: str = "slot-1") -> ExpandedSlot:
    start_time = utc(start)
    end_time = utc(end)
    return ExpandedSlot(
        original_slot_id=rule_id,
        start_time=start_time,
        end_time=end_time,
        duration_minutes=int((end_time - start_time).total_seconds() // 60),
        is_recurring=True,
        recurring_pattern="weekly",
    )


class TestWeekWindow:
    """Tests for week_window."""

    def test_monday_start(self):
        """Test a Thursday falls in the week starting Monday."""
        start, end = week_window(utc("2024-03-07 15:00"))

        assert start == utc("2024-03-04")
        assert end == utc("2024-03-11")

    def test_reference_on_first_day(self):
        """Test a Monday is the start of its own week."""
        start, end = week_window(utc("2024-03-04 00:00"))

        assert start == utc("2024-03-04")
        assert end == utc("2024-03-11")

    def test_sunday_start(self):
        """Test a week configured to start on Sunday."""
        start, end = week_window(utc("2024-03-07 15:00"), week_starts_on=pendulum.SUNDAY)

        assert start == utc("2024-03-03")
        assert end == utc("2024-03-10")


class TestSplitIntoSessions:
    """Tests for split_into_sessions."""

    def test_drops_partial_tail(self):
        """Test a 40 minute slot gives two 15 minute sessions."""
        sessions = split_into_sessions([slot("2024-03-06 09:00", "2024-03-06 09:40")])

        assert [(s.start_time, s.end_time) for s in sessions] == [
            (utc("2024-03-06 09:00"), utc("2024-03-06 09:15")),
            (utc("2024-03-06 09:15"), utc("2024-03-06 09:30")),
        ]
        assert all(s.duration_minutes == 15 for s in sessions)
        assert all(s.original_slot_id == "slot-1" for s in sessions)
        assert all(s.recurring_pattern == "weekly" for s in sessions)

    def test_exact_fit(self):
        """Test a slot that divides evenly."""
        sessions = split_into_sessions([slot("2024-03-06 09:00", "2024-03-06 10:00")], 30)

        assert len(sessions) == 2
        assert sessions[-1].end_time == utc("2024-03-06 10:00")

    def test_slot_shorter_than_session(self):
        """Test a slot too short for one session."""
        assert split_into_sessions([slot("2024-03-06 09:00", "2024-03-06 09:10")]) == []

    def test_keeps_slot_order(self):
        """Test sessions of several slots stay in input order."""
        sessions = split_into_sessions(
            [
                slot("2024-03-06 09:00", "2024-03-06 09:30", "a"),
                slot("2024-03-07 09:00", "2024-03-07 09:15", "b"),
            ]
        )

        assert [s.original_slot_id for s in sessions] == ["a", "a", "b"]

    def test_invalid_session_length(self):
        """Test a non-positive session length raises ValueError."""
        with pytest.raises(ValueError, match="greater than zero"):
            split_into_sessions([slot("2024-03-06 09:00", "2024-03-06 10:00")], 0)


class TestGroupByDay:
    """Tests for group_by_day."""

    def test_groups_in_order(self):
        """Test slots are bucketed per UTC day."""
        slots = [
            slot("2024-03-06 09:00", "2024-03-06 10:00", "a"),
            slot("2024-03-06 17:00", "2024-03-06 18:00", "b"),
            slot("2024-03-07 09:00", "2024-03-07 10:00", "c"),
        ]

        days = group_by_day(slots)

        assert list(days) == [pendulum.date(2024, 3, 6), pendulum.date(2024, 3, 7)]
        assert [s.original_slot_id for s in days[pendulum.date(2024, 3, 6)]] == ["a", "b"]

    def test_uses_local_day(self):
        """Test the day is taken in the requested timezone."""
        days = group_by_day(
            [slot("2024-03-02 02:00", "2024-03-02 03:00")],
            timezone="America/New_York",
        )

        assert list(days) == [pendulum.date(2024, 3, 1)]
