# tutoring_calendar/schemas/calendar.py
"""
Pydantic schemas for calendar projections (week / day / list).
"""

from datetime import date
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel

from .slots import TimeSlot


class ViewMode(str, Enum):
    WEEK = "week"
    DAY = "day"
    LIST = "list"


class SlotTone(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    PENDING = "pending"
    UNAVAILABLE = "unavailable"


class RenderedSlot(BaseModel):
    """A slot as drawn in a grid cell; clicking it selects ``slot.id``."""
    slot: TimeSlot
    label: str
    tone: SlotTone


class DayHeader(BaseModel):
    date: date
    weekday: str
    day_number: int
    month: str
    is_today: bool = False


class GridCell(BaseModel):
    date: date
    hour: int
    slots: list[RenderedSlot] = []
    placeholder: bool = False  # inert, outside business hours


class WeekRow(BaseModel):
    hour: int
    label: str  # "HH:00"
    cells: list[GridCell]


class WeekView(BaseModel):
    mode: Literal["week"] = "week"
    week_start: date
    week_end: date
    range_label: str
    days: list[DayHeader]
    rows: list[WeekRow]


class DayRow(BaseModel):
    hour: int
    label: str
    slots: list[RenderedSlot] = []
    placeholder: bool = False


class DayView(BaseModel):
    mode: Literal["day"] = "day"
    date: date
    title: str
    rows: list[DayRow]


class ListEntry(BaseModel):
    slot: TimeSlot
    date_label: str
    time_label: str


class ListView(BaseModel):
    mode: Literal["list"] = "list"
    title: str = "Najbliższe dostępne terminy"
    entries: list[ListEntry]
    empty_message: Optional[str] = None
