# tutoring_calendar/schemas/booking.py

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .catalog import Level, Subject
from .slots import LessonSlot, TimeSlot

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingContactData(BaseModel):
    """Contact form values captured right before booking."""
    child_name: str = ""
    parent_name: str = ""
    email: str = ""
    phone: str = ""

    model_config = _camel


class ContactPatch(BaseModel):
    """One or more changed contact fields (a keystroke)."""
    child_name: Optional[str] = None
    parent_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = _camel


class BookingData(BaseModel):
    reservation_id: str
    student_name: str
    parent_name: str
    email: str
    phone: str
    subject: Subject
    level: Level
    start_time: datetime
    end_time: datetime
    note: Optional[str] = None
    status: str


class WebhookPayload(BaseModel):
    """JSON body posted to the automation webhook."""
    reservation_id: str
    student_name: str
    parent_name: str
    email: str
    phone: str
    subject: str
    subject_icon: str
    level: str
    level_description: str
    start_time: datetime
    end_time: datetime
    note: Optional[str] = None
    status: str
    timestamp: datetime

    model_config = _camel


class WebhookResponse(BaseModel):
    success: bool
    error: Optional[str] = None


class ReservationState(str, Enum):
    UNSELECTED = "unselected"
    SELECTED = "selected"
    IN_FLIGHT = "in_flight"
    BOOKED = "booked"
    BOOKING_FAILED = "booking_failed"


class SelectRequest(BaseModel):
    slot_id: str


class BookingRequest(BaseModel):
    slot_id: str
    note: Optional[str] = None


class BookingResponse(BaseModel):
    reservation_id: str
    state: ReservationState
    lesson: LessonSlot
    notification: WebhookResponse
    message: str = "Twoja lekcja została zarezerwowana. Szczegóły wysłaliśmy na e-mail."


class ReservationDetails(BaseModel):
    """Side panel content for the selected slot."""
    heading: str
    status_label: Optional[str] = None
    slot: Optional[TimeSlot] = None
    subject: Optional[Subject] = None
    level: Optional[Level] = None
    date_label: Optional[str] = None
    time_label: Optional[str] = None
    duration_label: Optional[str] = None
    can_book: bool = False
    state: ReservationState = ReservationState.UNSELECTED
    contact: BookingContactData = Field(default_factory=BookingContactData)
