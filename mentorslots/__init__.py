"""
mentorslots - materialize bookable mentor availability from recurring rules.
"""

__version__ = "0.1.0"
