"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService, RuleSourceProtocol

__all__ = ["AvailabilityService", "RuleSourceProtocol"]
