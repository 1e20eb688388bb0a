"""
Service layer helpers that orchestrate domain logic.
"""

from .daily import DEFAULT_MAX_DAYS, DailyTimeslotGenerator, generate_daily_timeslots

__all__ = ["DEFAULT_MAX_DAYS", "DailyTimeslotGenerator", "generate_daily_timeslots"]
