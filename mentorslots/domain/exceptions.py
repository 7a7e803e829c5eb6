"""
Domain-specific exception hierarchy for the mentor availability package.
"""


class MentorSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidRuleError(MentorSlotsError, ValueError):
    """Raised when a stored availability record cannot be turned into a rule."""


class RuleSourceError(MentorSlotsError):
    """Raised when availability records cannot be fetched from storage."""
