# tutoring_calendar/schemas/session.py

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .booking import BookingContactData
from .calendar import ViewMode
from .slots import TimeSlot


class CalendarSessionState(BaseModel):
    """Everything a visitor's calendar screen holds between requests."""
    id: str
    subject_id: Optional[str] = None
    level_id: Optional[str] = None
    current_week: date
    view_mode: ViewMode = ViewMode.WEEK
    slots: list[TimeSlot] = []
    selected_slot_id: Optional[str] = None
    contact: BookingContactData = Field(default_factory=BookingContactData)


class SubjectChoice(BaseModel):
    subject_id: str


class LevelChoice(BaseModel):
    level_id: str


class NavigateRequest(BaseModel):
    direction: Literal["prev", "next", "today"]


class ViewModeChoice(BaseModel):
    mode: ViewMode
