# tutoring_calendar/services/calendar_views.py
"""
Calendar projections.

Turns the active slot list into week, day or list layouts. Projections are
read-only: the input list is never reordered or modified.
"""

from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..config import get_settings
from ..errors import InvalidSelectionError
from ..schemas.calendar import (
    DayHeader,
    DayRow,
    DayView,
    GridCell,
    ListEntry,
    ListView,
    RenderedSlot,
    SlotTone,
    ViewMode,
    WeekRow,
    WeekView,
)
from ..schemas.slots import AvailabilitySlot, LessonSlot, LessonStatus, TimeSlot
from ..utils import pl_dates
from .slots import SlotRules, get_slot_rules, is_weekend, shift_week, week_days, week_start_for

LESSON_LABEL = "Twoja lekcja"
EMPTY_LIST_MESSAGE = "Brak dostępnych terminów w tym okresie"


def slot_tone(slot: TimeSlot) -> SlotTone:
    if isinstance(slot, AvailabilitySlot):
        return SlotTone.AVAILABLE
    if isinstance(slot, LessonSlot):
        if slot.status == LessonStatus.CONFIRMED:
            return SlotTone.BOOKED
        if slot.status == LessonStatus.PENDING:
            return SlotTone.PENDING
        return SlotTone.UNAVAILABLE
    raise TypeError(f"Unknown slot variant: {type(slot).__name__}")


def slot_label(slot: TimeSlot) -> str:
    if isinstance(slot, AvailabilitySlot):
        return str(slot.start.hour)
    if isinstance(slot, LessonSlot):
        return LESSON_LABEL
    raise TypeError(f"Unknown slot variant: {type(slot).__name__}")


def _render(slot: TimeSlot) -> RenderedSlot:
    return RenderedSlot(slot=slot, label=slot_label(slot), tone=slot_tone(slot))


def slots_at(slots: Iterable[TimeSlot], day: date, hour: int) -> list[TimeSlot]:
    """Slots starting on ``day`` within ``hour``."""
    return [s for s in slots if s.start.date() == day and s.start.hour == hour]


# ── Week ─────────────────────────────────────────────────────────────────


def render_week(
    slots: Sequence[TimeSlot],
    current_week: date,
    today: Optional[date] = None,
    rules: SlotRules | None = None,
) -> WeekView:
    rules = rules or get_slot_rules()
    today = today or date.today()
    days = week_days(current_week)

    headers = [
        DayHeader(
            date=d,
            weekday=pl_dates.weekday_short(d),
            day_number=d.day,
            month=pl_dates.month_short(d),
            is_today=d == today,
        )
        for d in days
    ]

    rows = []
    for hour in rules.grid_hours:
        cells = []
        for d in days:
            found = slots_at(slots, d, hour)
            cells.append(GridCell(
                date=d,
                hour=hour,
                slots=[_render(s) for s in found],
                placeholder=not found and not rules.is_open_hour(hour, is_weekend(d)),
            ))
        rows.append(WeekRow(hour=hour, label=rules.format_hour(hour), cells=cells))

    return WeekView(
        week_start=days[0],
        week_end=days[-1],
        range_label=pl_dates.week_range(days[0], days[-1]),
        days=headers,
        rows=rows,
    )


# ── Day ──────────────────────────────────────────────────────────────────


def render_day(
    slots: Sequence[TimeSlot],
    current_week: date,
    day: Optional[date] = None,
    rules: SlotRules | None = None,
) -> DayView:
    """
    Render one day of the visible week.

    Defaults to the Monday of the week; ``day`` may pick any other day of
    the same week.
    """
    rules = rules or get_slot_rules()
    monday = week_start_for(current_week)
    if day is None:
        day = monday
    elif not monday <= day <= monday + timedelta(days=6):
        raise InvalidSelectionError(f"{day.isoformat()} is outside the visible week")

    rows = []
    for hour in rules.grid_hours:
        found = slots_at(slots, day, hour)
        rows.append(DayRow(
            hour=hour,
            label=rules.format_hour(hour),
            slots=[_render(s) for s in found],
            placeholder=not found,
        ))

    return DayView(date=day, title=pl_dates.full_date(day), rows=rows)


# ── List ─────────────────────────────────────────────────────────────────


def render_list(slots: Sequence[TimeSlot], limit: Optional[int] = None) -> ListView:
    """Upcoming availability, earliest first, at most ``limit`` entries (default LIST_VIEW_LIMIT setting)."""
    if limit is None:
        limit = get_settings().list_view_limit
    available = sorted(
        (s for s in slots if isinstance(s, AvailabilitySlot)),
        key=lambda s: s.start,
    )[:limit]

    entries = [
        ListEntry(
            slot=s,
            date_label=pl_dates.full_date(s.start.date(), with_year=False),
            time_label=pl_dates.time_range(s.start, s.end),
        )
        for s in available
    ]
    return ListView(
        entries=entries,
        empty_message=None if entries else EMPTY_LIST_MESSAGE,
    )


# ── Dispatch / navigation ────────────────────────────────────────────────


def render_view(
    mode: ViewMode,
    slots: Sequence[TimeSlot],
    current_week: date,
    day: Optional[date] = None,
    today: Optional[date] = None,
    limit: Optional[int] = None,
) -> WeekView | DayView | ListView:
    if mode == ViewMode.WEEK:
        return render_week(slots, current_week, today=today)
    if mode == ViewMode.DAY:
        return render_day(slots, current_week, day=day)
    if mode == ViewMode.LIST:
        return render_list(slots, limit=limit)
    raise ValueError(f"Unknown view mode: {mode}")


def navigate_week(current_week: date, direction: str, today: Optional[date] = None) -> date:
    """
    prev / next → shift by 7 days; today → reset to today's date.
    """
    if direction == "prev":
        return shift_week(current_week, -1)
    if direction == "next":
        return shift_week(current_week, 1)
    if direction == "today":
        return today or date.today()
    raise InvalidSelectionError(f"Unknown direction: {direction}")
