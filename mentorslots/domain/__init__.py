"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import InvalidRuleError, MentorSlotsError, RuleSourceError
from .expander import RecurrenceExpander, expand_recurring_slots
from .models import AvailabilityRule, ExpandedSlot, RecurringPattern
from .slot_views import group_by_day, split_into_sessions, week_window

__all__ = [
    "AvailabilityRule",
    "ExpandedSlot",
    "RecurringPattern",
    "RecurrenceExpander",
    "expand_recurring_slots",
    "group_by_day",
    "split_into_sessions",
    "week_window",
    "MentorSlotsError",
    "InvalidRuleError",
    "RuleSourceError",
]
