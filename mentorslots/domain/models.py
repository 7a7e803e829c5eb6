"""
Domain models for availability rules and the slots expanded from them.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import pendulum
from pendulum import DateTime

from .exceptions import InvalidRuleError


class RecurringPattern(str, Enum):
    """Repetition patterns understood by the expander."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def _parse_timestamp(value: Any, field: str) -> DateTime:
    """Parse an ISO 8601 value from storage into a UTC DateTime."""
    if isinstance(value, DateTime):
        return value.in_timezone("UTC")

    try:
        parsed = pendulum.parse(str(value))
    except (ValueError, TypeError) as exc:
        raise InvalidRuleError(f"Invalid {field} timestamp: {value!r}") from exc

    if not isinstance(parsed, DateTime):
        raise InvalidRuleError(f"Invalid {field} timestamp: {value!r}")

    return parsed.in_timezone("UTC")


@dataclass(frozen=True)
class AvailabilityRule:
    """
    A stored availability record for a mentor.

    For recurring rules, ``start_time``/``end_time`` are the anchor occurrence:
    the first instance and the time-of-day and duration template for all
    later ones. ``recurring_pattern`` is kept as stored so that unknown values
    reach the expander, which ignores them.

    Invariant: start_time must be before end_time.
    """
    id: str
    start_time: DateTime
    end_time: DateTime
    duration_minutes: int
    is_recurring: bool = False
    recurring_pattern: Optional[str] = None
    recurring_end_date: Optional[DateTime] = None
    mentor_id: Optional[str] = None
    is_active: bool = True

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Start time {self.start_time} must be before end time {self.end_time}"
            )

    @property
    def last_occurrence_date(self) -> Optional[date]:
        """Calendar date (in the anchor's timezone) after which nothing repeats."""
        if self.recurring_end_date is None:
            return None
        return self.recurring_end_date.in_timezone(self.start_time.tzinfo).date()

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "AvailabilityRule":
        """
        Build a rule from a storage row.

        Args:
            record: Mapping with the ``availability_slots`` columns. Timestamps
                are ISO 8601 strings.

        Returns:
            AvailabilityRule with all timestamps normalized to UTC

        Raises:
            InvalidRuleError: If required columns are missing or unparsable
        """
        try:
            rule_id = record["id"]
            raw_start = record["start_time"]
            raw_end = record["end_time"]
        except KeyError as exc:
            raise InvalidRuleError(f"Availability record is missing {exc.args[0]!r}") from exc

        start = _parse_timestamp(raw_start, "start_time")
        end = _parse_timestamp(raw_end, "end_time")

        raw_end_date = record.get("recurring_end_date")
        recurring_end_date = (
            _parse_timestamp(raw_end_date, "recurring_end_date") if raw_end_date else None
        )

        duration = record.get("duration_minutes")
        if duration is None:
            duration = int((end - start).total_seconds() // 60)

        try:
            return cls(
                id=str(rule_id),
                start_time=start,
                end_time=end,
                duration_minutes=int(duration),
                is_recurring=bool(record.get("is_recurring", False)),
                recurring_pattern=record.get("recurring_pattern"),
                recurring_end_date=recurring_end_date,
                mentor_id=record.get("mentor_id"),
                is_active=bool(record.get("is_active", True)),
            )
        except (TypeError, ValueError) as exc:
            raise InvalidRuleError(f"Invalid availability record {rule_id!r}: {exc}") from exc


@dataclass(frozen=True)
class ExpandedSlot:
    """
    One concrete occurrence generated from an availability rule.
    """
    original_slot_id: str
    start_time: DateTime
    end_time: DateTime
    duration_minutes: int
    is_recurring: bool
    recurring_pattern: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        """Render the slot in the shape the booking front-end consumes."""
        return {
            "originalSlotId": self.original_slot_id,
            "start_time": self.start_time.to_iso8601_string(),
            "end_time": self.end_time.to_iso8601_string(),
            "duration_minutes": self.duration_minutes,
            "isRecurring": self.is_recurring,
            "recurringPattern": self.recurring_pattern,
        }

    def format_display(self, timezone: str = "UTC") -> str:
        """
        Format the slot for display.
        Format: Weekday, YYYY-MM-DD | HH:MM - HH:MM (N min, pattern)
        """
        start = self.start_time.in_timezone(timezone)
        end = self.end_time.in_timezone(timezone)

        label = self.recurring_pattern if self.is_recurring else "one-off"
        time_str = f"{start.format('HH:mm')} - {end.format('HH:mm')}"

        return (
            f"{start.format('dddd, YYYY-MM-DD')} | {time_str} "
            f"({self.duration_minutes} min, {label})"
        )
