# tutoring_calendar/schemas/slots.py
"""
Pydantic schemas for time slots.

A slot is a tagged union on ``type``:
- availability: open for booking, carries no status
- lesson: already booked, always carries a status
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, model_validator

LESSON_DURATION = timedelta(hours=1)


class LessonStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"


class _SlotBase(BaseModel):
    id: str
    subject_id: str
    level_id: str
    start: datetime
    end: datetime

    price: Optional[float] = None
    teacher_name: Optional[str] = None
    note: Optional[str] = None

    model_config = {"extra": "forbid", "frozen": True}

    @model_validator(mode="after")
    def _check_duration(self):
        if self.end - self.start != LESSON_DURATION:
            raise ValueError("slot end must be exactly one hour after start")
        return self


class AvailabilitySlot(_SlotBase):
    type: Literal["availability"] = "availability"


class LessonSlot(_SlotBase):
    type: Literal["lesson"] = "lesson"
    status: LessonStatus


TimeSlot = Annotated[
    Union[AvailabilitySlot, LessonSlot],
    Field(discriminator="type"),
]

slot_list_adapter = TypeAdapter(list[TimeSlot])
