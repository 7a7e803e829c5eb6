"""
Application services for presenting a mentor's bookable availability.

The service loads rules through a rule-source adapter and delegates the
expansion itself to the domain-level ``RecurrenceExpander``. Logging and
timing of the expansion live here, keeping the algorithm free of side
effects.
"""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Dict, List, Optional, Protocol

from pendulum import DateTime

from ..domain.expander import RecurrenceExpander
from ..domain.models import AvailabilityRule, ExpandedSlot
from ..domain.recurrence import OCCURRENCE_GENERATORS
from ..domain.slot_views import (
    SESSION_DURATION_MINUTES,
    group_by_day,
    split_into_sessions,
    week_window,
)

logger = logging.getLogger(__name__)

SUPPORTED_PATTERNS = tuple(OCCURRENCE_GENERATORS)


class RuleSourceProtocol(Protocol):
    """Protocol describing the rule storage behaviour needed by the service."""

    def get_rules(self, mentor_id: Optional[str] = None) -> List[AvailabilityRule]:
        """Return the stored availability rules of a mentor."""


class AvailabilityService:
    """
    Orchestrates rule retrieval and expansion for one display window.

    Dependency inversion toward a protocol makes it easy to plug in the REST
    adapter, the JSON export, or an in-memory stub in tests.
    """

    def __init__(
        self,
        rule_source: RuleSourceProtocol,
        expander: Optional[RecurrenceExpander] = None,
        session_minutes: int = SESSION_DURATION_MINUTES,
        week_starts_on: int = 0,
    ) -> None:
        self._rule_source = rule_source
        self._expander = expander or RecurrenceExpander()
        self._session_minutes = session_minutes
        self._week_starts_on = week_starts_on

    def load_rules(self, mentor_id: Optional[str] = None) -> List[AvailabilityRule]:
        """Load the mentor's rules, keeping only active ones."""
        rules = self._rule_source.get_rules(mentor_id)
        active = [rule for rule in rules if rule.is_active]

        if len(active) != len(rules):
            logger.debug("Ignoring %d inactive rule(s)", len(rules) - len(active))

        return active

    def expanded_slots(
        self,
        *,
        mentor_id: Optional[str],
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[ExpandedSlot]:
        """
        Load rules and expand them over ``[window_start, window_end)``.
        """
        rules = self.load_rules(mentor_id)
        return self.expand(rules, window_start=window_start, window_end=window_end)

    def expand(
        self,
        rules: List[AvailabilityRule],
        *,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[ExpandedSlot]:
        """Expand already loaded rules, logging inputs, result size and timing."""
        logger.info(
            "Expanding %d rule(s) from %s to %s",
            len(rules),
            window_start,
            window_end,
        )

        started = time.perf_counter()
        slots = self._expander.expand(rules, window_start, window_end)
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.info("Generated %d slot(s) in %.1f ms", len(slots), elapsed_ms)

        produced = {slot.original_slot_id for slot in slots}
        for rule in rules:
            if rule.is_recurring and rule.recurring_pattern not in SUPPORTED_PATTERNS:
                logger.warning(
                    "Rule %s has unsupported recurring pattern %r; no slots generated",
                    rule.id,
                    rule.recurring_pattern,
                )
            elif rule.is_recurring and rule.id not in produced:
                logger.debug("Rule %s has no occurrences in the window", rule.id)

        return slots

    def week_slots(
        self,
        *,
        mentor_id: Optional[str],
        reference: DateTime,
    ) -> List[ExpandedSlot]:
        """Expanded slots of the week containing ``reference``."""
        window_start, window_end = week_window(reference, self._week_starts_on)
        return self.expanded_slots(
            mentor_id=mentor_id,
            window_start=window_start,
            window_end=window_end,
        )

    def bookable_slots(
        self,
        *,
        mentor_id: Optional[str],
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[ExpandedSlot]:
        """
        Expanded slots cut into fixed-length bookable sessions.

        Checking the sessions against existing bookings is up to the caller.
        """
        slots = self.expanded_slots(
            mentor_id=mentor_id,
            window_start=window_start,
            window_end=window_end,
        )
        return split_into_sessions(slots, self._session_minutes)

    def slots_by_day(
        self,
        *,
        mentor_id: Optional[str],
        window_start: DateTime,
        window_end: DateTime,
        timezone: str = "UTC",
    ) -> Dict[date, List[ExpandedSlot]]:
        """Expanded slots grouped into calendar days of ``timezone``."""
        slots = self.expanded_slots(
            mentor_id=mentor_id,
            window_start=window_start,
            window_end=window_end,
        )
        return group_by_day(slots, timezone)
