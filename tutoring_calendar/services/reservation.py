# tutoring_calendar/services/reservation.py
"""
Reservation workflow.

Per-slot state (per calendar session):

    unselected → selected → in_flight → booked
                                     ↘ booking_failed

Booking is two-phase:
1. Local commit: after a fixed delay the availability slot is replaced by a
   confirmed lesson on the session's slot board.
2. Best-effort notify: booking data goes to the webhook dispatcher.

A failed notification is logged and reported but never rolls back step 1.
Only one booking per (session, slot) can be in flight; there is no locking
across sessions.
"""

import asyncio
import logging
import secrets
import string
import time
from typing import Awaitable, Callable, Optional, Protocol

from ..errors import BookingInProgressError, SlotNotBookableError, SlotNotFoundError
from ..schemas.booking import (
    BookingContactData,
    BookingData,
    BookingResponse,
    ReservationDetails,
    ReservationState,
    WebhookResponse,
)
from ..schemas.catalog import Level, Subject
from ..schemas.slots import AvailabilitySlot, LessonSlot, LessonStatus, TimeSlot
from ..utils import pl_dates
from .catalog import level_or_unknown, subject_or_unknown
from .webhook import WebhookService

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "Nie podano"
PLACEHOLDER_EMAIL = "niepodano@example.com"
LESSON_TEACHER_NAME = "Twoja lekcja"
LESSON_PREFIX = "lesson_"

_BASE36 = string.digits + string.ascii_lowercase

AVAILABLE_LABEL = "Dostępna"
STATUS_LABELS = {
    LessonStatus.CONFIRMED: "Potwierdzona",
    LessonStatus.PENDING: "Oczekująca",
    LessonStatus.CANCELLED: "Anulowana",
}


class SlotBoard(Protocol):
    """The active slot set owned by one calendar session."""

    async def load(self) -> list[TimeSlot]: ...

    async def replace(self, slots: list[TimeSlot]) -> None: ...


class InMemorySlotBoard:
    def __init__(self, slots: Optional[list[TimeSlot]] = None):
        self.slots: list[TimeSlot] = list(slots or [])

    async def load(self) -> list[TimeSlot]:
        return list(self.slots)

    async def replace(self, slots: list[TimeSlot]) -> None:
        self.slots = list(slots)


# ── Helpers ──────────────────────────────────────────────────────────────


def new_reservation_id(now_ms: Optional[int] = None) -> str:
    """res_{epoch ms}_{9 random base36 chars}"""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"res_{now_ms}_{suffix}"


def with_placeholders(contact: BookingContactData) -> BookingContactData:
    """Empty contact fields never block a booking; they get stand-in text."""
    return BookingContactData(
        child_name=contact.child_name or PLACEHOLDER_TEXT,
        parent_name=contact.parent_name or PLACEHOLDER_TEXT,
        email=contact.email or PLACEHOLDER_EMAIL,
        phone=contact.phone or PLACEHOLDER_TEXT,
    )


def find_slot(slots: list[TimeSlot], slot_id: str) -> Optional[TimeSlot]:
    for slot in slots:
        if slot.id == slot_id:
            return slot
    return None


def commit_booking(
    slots: list[TimeSlot],
    slot: AvailabilitySlot,
    note: Optional[str] = None,
) -> tuple[list[TimeSlot], LessonSlot]:
    """
    Replace an availability slot with a confirmed lesson.

    Returns a new list; the input list is left untouched.
    """
    lesson = LessonSlot(
        **slot.model_dump(exclude={"type", "id", "teacher_name", "note"}),
        id=f"{LESSON_PREFIX}{slot.id}",
        status=LessonStatus.CONFIRMED,
        teacher_name=LESSON_TEACHER_NAME,
        note=note or slot.note,
    )
    updated = [s for s in slots if s.id != slot.id]
    updated.append(lesson)
    return updated, lesson


def reservation_details(
    slot: Optional[TimeSlot],
    subject: Optional[Subject],
    level: Optional[Level],
    state: ReservationState = ReservationState.UNSELECTED,
    contact: Optional[BookingContactData] = None,
) -> ReservationDetails:
    contact = contact or BookingContactData()

    if slot is None:
        return ReservationDetails(
            heading="Wybór lekcji",
            status_label="Wybierz termin",
            subject=subject,
            level=level,
            contact=contact,
        )

    if isinstance(slot, AvailabilitySlot):
        heading = "Rezerwacja lekcji"
        status_label = AVAILABLE_LABEL
        can_book = state not in (ReservationState.IN_FLIGHT, ReservationState.BOOKED)
    elif isinstance(slot, LessonSlot):
        heading = "Szczegóły rezerwacji"
        status_label = STATUS_LABELS[slot.status]
        can_book = False
    else:
        raise TypeError(f"Unknown slot variant: {type(slot).__name__}")

    return ReservationDetails(
        heading=heading,
        status_label=status_label,
        slot=slot,
        subject=subject,
        level=level,
        date_label=pl_dates.full_date(slot.start.date()),
        time_label=pl_dates.time_range(slot.start, slot.end),
        duration_label="Czas trwania: 60 minut",
        can_book=can_book,
        state=state,
        contact=contact,
    )


# ── Workflow ─────────────────────────────────────────────────────────────


class ReservationWorkflow:
    def __init__(
        self,
        dispatcher: WebhookService,
        delay_seconds: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.dispatcher = dispatcher
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._states: dict[tuple[str, str], ReservationState] = {}
        self._in_flight: set[tuple[str, str]] = set()

    def state_of(self, owner: str, slot_id: str) -> ReservationState:
        return self._states.get((owner, slot_id), ReservationState.UNSELECTED)

    def is_in_flight(self, owner: str, slot_id: str) -> bool:
        return (owner, slot_id) in self._in_flight

    def select(self, owner: str, slot: TimeSlot) -> ReservationState:
        """
        Slot click. Availability slots become selected for booking;
        lessons are only shown, their state does not change.
        """
        if not isinstance(slot, AvailabilitySlot):
            return self.state_of(owner, slot.id)

        current = self.state_of(owner, slot.id)
        if current in (ReservationState.IN_FLIGHT, ReservationState.BOOKED):
            return current

        for key, state in list(self._states.items()):
            if key[0] == owner and state == ReservationState.SELECTED:
                del self._states[key]
        self._states[(owner, slot.id)] = ReservationState.SELECTED
        return ReservationState.SELECTED

    def owners(self) -> set[str]:
        return {key[0] for key in self._states} | {key[0] for key in self._in_flight}

    def forget(self, owner: str) -> None:
        """Drop all state for a closed session."""
        for key in [k for k in self._states if k[0] == owner]:
            del self._states[key]

    async def book(
        self,
        owner: str,
        board: SlotBoard,
        slot_id: str,
        contact: BookingContactData,
        note: Optional[str] = None,
    ) -> BookingResponse:
        key = (owner, slot_id)
        if key in self._in_flight:
            raise BookingInProgressError(f"Booking of {slot_id} already in progress")
        self._in_flight.add(key)

        try:
            slot = find_slot(await board.load(), slot_id)
            if slot is None:
                raise SlotNotFoundError(f"Slot {slot_id} not found")
            if not isinstance(slot, AvailabilitySlot):
                raise SlotNotBookableError(f"Slot {slot_id} is already a lesson")

            self._states[key] = ReservationState.IN_FLIGHT
            logger.info(f"Booking in flight: session={owner} slot={slot_id}")

            await self._sleep(self.delay_seconds)

            # Last write wins: commit against whatever the board holds now
            updated, lesson = commit_booking(await board.load(), slot, note)
            await board.replace(updated)
        except BaseException:
            if self._states.get(key) == ReservationState.IN_FLIGHT:
                self._states[key] = ReservationState.SELECTED
            raise
        finally:
            self._in_flight.discard(key)

        self._states.pop(key, None)
        self._states[(owner, lesson.id)] = ReservationState.BOOKED
        logger.info(f"Booked: session={owner} slot={slot_id} → {lesson.id}")

        reservation_id = new_reservation_id()
        try:
            notification = await self._notify(reservation_id, lesson, contact, note)
        except Exception as e:
            logger.exception(f"Webhook dispatch crashed for booking {reservation_id}")
            notification = WebhookResponse(success=False, error=f"Internal error: {e}")

        state = ReservationState.BOOKED
        if not notification.success:
            state = ReservationState.BOOKING_FAILED
            self._states[(owner, lesson.id)] = state
            logger.error(
                f"Booking {reservation_id} kept locally, webhook failed: {notification.error}"
            )

        return BookingResponse(
            reservation_id=reservation_id,
            state=state,
            lesson=lesson,
            notification=notification,
        )

    async def _notify(
        self,
        reservation_id: str,
        lesson: LessonSlot,
        contact: BookingContactData,
        note: Optional[str],
    ) -> WebhookResponse:
        contact = with_placeholders(contact)
        data = BookingData(
            reservation_id=reservation_id,
            student_name=contact.child_name,
            parent_name=contact.parent_name,
            email=contact.email,
            phone=contact.phone,
            subject=subject_or_unknown(lesson.subject_id),
            level=level_or_unknown(lesson.level_id),
            start_time=lesson.start,
            end_time=lesson.end,
            note=note,
            status=LessonStatus.CONFIRMED.value,
        )
        payload = self.dispatcher.create_booking_data(data)
        return await self.dispatcher.send_booking_data(payload)
