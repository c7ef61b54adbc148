# tutoring_calendar/services/slots/__init__.py
"""
Slot generation module.

Slots are derived, never stored: the same (subject, level, week) always
yields the same availability set.
"""

from .config import SlotRules, get_slot_rules
from .generator import (
    generate_week_slots,
    is_weekend,
    shift_week,
    slot_id,
    week_days,
    week_start_for,
)

__all__ = [
    "SlotRules",
    "get_slot_rules",
    "generate_week_slots",
    "is_weekend",
    "shift_week",
    "slot_id",
    "week_days",
    "week_start_for",
]
