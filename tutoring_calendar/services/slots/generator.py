# tutoring_calendar/services/slots/generator.py
"""
Availability slot generation.

Produces one week of one-hour availability slots for a subject/level pair.

Rules:
✓ weekdays: one slot per hour in the weekday band (14:00–22:00)
✓ weekends: one slot per hour in the weekend band (09:00–14:00)
✓ ids derived from (subject, level, day offset, hour) → regeneration is stable

Does NOT:
✗ validate subject/level ids (done at the HTTP boundary)
✗ know about booked lessons (those live in the calendar session)
"""

from datetime import date, datetime, time, timedelta

from ...schemas.slots import LESSON_DURATION, AvailabilitySlot
from .config import SlotRules, get_slot_rules

DAYS_IN_WEEK = 7


def week_start_for(day: date) -> date:
    """Monday of the week containing ``day``."""
    if isinstance(day, datetime):
        day = day.date()
    return day - timedelta(days=day.weekday())


def shift_week(day: date, weeks: int) -> date:
    """Move ``day`` by whole weeks (7 days each)."""
    return day + timedelta(days=DAYS_IN_WEEK * weeks)


def week_days(week_start: date) -> list[date]:
    monday = week_start_for(week_start)
    return [monday + timedelta(days=i) for i in range(DAYS_IN_WEEK)]


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def slot_id(subject_id: str, level_id: str, day_offset: int, hour: int) -> str:
    return f"slot_{subject_id}_{level_id}_{day_offset}_{hour}"


def generate_week_slots(
    subject_id: str,
    level_id: str,
    week_start: date,
    rules: SlotRules | None = None,
) -> list[AvailabilitySlot]:
    """
    Generate availability slots for the week containing ``week_start``.

    Returns:
        Slots ordered by day, then hour. 66 slots for a full week
        with the default rules (5 × 8 weekday + 2 × 5 weekend).
    """
    rules = rules or get_slot_rules()

    slots: list[AvailabilitySlot] = []
    for offset, day in enumerate(week_days(week_start)):
        for hour in rules.hours_for(is_weekend(day)):
            start = datetime.combine(day, time(hour=hour))
            slots.append(AvailabilitySlot(
                id=slot_id(subject_id, level_id, offset, hour),
                subject_id=subject_id,
                level_id=level_id,
                start=start,
                end=start + LESSON_DURATION,
            ))

    return slots
