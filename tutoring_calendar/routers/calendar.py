# tutoring_calendar/routers/calendar.py
"""
Public booking calendar endpoints.

Session state lives in Redis (see services/session_store.py); slots are
regenerated whenever subject, level or week change.

Flow:
1. POST /calendar/sessions                  → new session
2. PUT  /calendar/sessions/{id}/subject     → subject (clears level and slots)
3. PUT  /calendar/sessions/{id}/level       → level (generates the week)
4. GET  /calendar/sessions/{id}/render      → week / day / list projection
5. POST /calendar/sessions/{id}/select      → slot click, details panel
6. PATCH /calendar/sessions/{id}/contact    → contact keystrokes (debounced)
7. POST /calendar/sessions/{id}/book        → booking

Every route touching a session is ``async def``: the session blob is read and
written back on the event loop with no await in between, so it cannot
interleave with a booking commit.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel

from ..config import get_settings
from ..dependencies import get_contact_forms, get_session_store, get_workflow
from ..errors import InvalidSelectionError, SessionNotFoundError, SlotNotFoundError
from ..schemas.booking import (
    BookingContactData,
    BookingRequest,
    BookingResponse,
    ContactPatch,
    ReservationDetails,
    ReservationState,
    SelectRequest,
)
from ..schemas.calendar import DayView, ListView, ViewMode, WeekView
from ..schemas.session import (
    CalendarSessionState,
    LevelChoice,
    NavigateRequest,
    SubjectChoice,
    ViewModeChoice,
)
from ..schemas.slots import AvailabilitySlot
from ..services.calendar_views import navigate_week, render_view
from ..services.catalog import get_level, get_subject
from ..services.contact_form import ContactFormRegistry
from ..services.reservation import ReservationWorkflow, find_slot, reservation_details
from ..services.session_store import CalendarSessionStore, SessionSlotBoard
from ..services.slots import generate_week_slots, week_start_for
from ..utils.page_title import PageTitleStore, get_page_title

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar", tags=["calendar"])

CALENDAR_TITLE = "Kalendarz zajęć"


class CalendarScreen(BaseModel):
    title: str
    session: CalendarSessionState


# ── Helpers ──────────────────────────────────────────────────────────────


def _screen(state: CalendarSessionState, titles: PageTitleStore) -> CalendarScreen:
    with titles.scoped(CALENDAR_TITLE):
        return CalendarScreen(title=titles.get(), session=state)


def _regenerate(state: CalendarSessionState) -> None:
    """Replace the whole slot set for the current subject/level/week."""
    if state.subject_id and state.level_id:
        state.slots = generate_week_slots(
            state.subject_id, state.level_id, week_start_for(state.current_week)
        )
    else:
        state.slots = []
    state.selected_slot_id = None


# ── Stateless generation ─────────────────────────────────────────────────


@router.get("/slots", response_model=list[AvailabilitySlot])
def get_week_slots(
    subject_id: str,
    level_id: str,
    week: Optional[date] = None,
):
    """Availability for the week containing ``week`` (default: this week)."""
    return generate_week_slots(subject_id, level_id, week_start_for(week or date.today()))


# ── Session lifecycle ────────────────────────────────────────────────────


@router.post("/sessions", response_model=CalendarScreen, status_code=status.HTTP_201_CREATED)
async def create_session(
    store: CalendarSessionStore = Depends(get_session_store),
    titles: PageTitleStore = Depends(get_page_title),
):
    return _screen(store.create(), titles)


@router.get("/sessions/{session_id}", response_model=CalendarScreen)
async def get_session(
    session_id: str,
    store: CalendarSessionStore = Depends(get_session_store),
    titles: PageTitleStore = Depends(get_page_title),
):
    return _screen(store.get(session_id), titles)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(
    session_id: str,
    store: CalendarSessionStore = Depends(get_session_store),
    workflow: ReservationWorkflow = Depends(get_workflow),
    forms: ContactFormRegistry = Depends(get_contact_forms),
):
    await forms.close(session_id)
    workflow.forget(session_id)
    if not store.delete(session_id):
        raise SessionNotFoundError(f"Session {session_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Subject / level / week / view ────────────────────────────────────────


@router.put("/sessions/{session_id}/subject", response_model=CalendarScreen)
async def choose_subject(
    session_id: str,
    data: SubjectChoice,
    store: CalendarSessionStore = Depends(get_session_store),
    forms: ContactFormRegistry = Depends(get_contact_forms),
    titles: PageTitleStore = Depends(get_page_title),
):
    if get_subject(data.subject_id) is None:
        raise InvalidSelectionError(f"Unknown subject: {data.subject_id}")

    state = store.get(session_id)
    forms.cancel_pending(session_id)

    state.subject_id = data.subject_id
    state.level_id = None
    _regenerate(state)
    store.save(state)
    return _screen(state, titles)


@router.put("/sessions/{session_id}/level", response_model=CalendarScreen)
async def choose_level(
    session_id: str,
    data: LevelChoice,
    store: CalendarSessionStore = Depends(get_session_store),
    forms: ContactFormRegistry = Depends(get_contact_forms),
    titles: PageTitleStore = Depends(get_page_title),
):
    if get_level(data.level_id) is None:
        raise InvalidSelectionError(f"Unknown level: {data.level_id}")

    state = store.get(session_id)
    if not state.subject_id:
        raise InvalidSelectionError("Choose a subject first")

    forms.cancel_pending(session_id)

    state.level_id = data.level_id
    _regenerate(state)
    store.save(state)
    logger.info(
        f"Slots generated: session={session_id} subject={state.subject_id} "
        f"level={state.level_id} week={week_start_for(state.current_week)}"
    )
    return _screen(state, titles)


@router.post("/sessions/{session_id}/navigate", response_model=CalendarScreen)
async def navigate(
    session_id: str,
    data: NavigateRequest,
    store: CalendarSessionStore = Depends(get_session_store),
    titles: PageTitleStore = Depends(get_page_title),
):
    state = store.get(session_id)
    state.current_week = navigate_week(state.current_week, data.direction)
    _regenerate(state)
    store.save(state)
    return _screen(state, titles)


@router.put("/sessions/{session_id}/view", response_model=CalendarScreen)
async def set_view_mode(
    session_id: str,
    data: ViewModeChoice,
    store: CalendarSessionStore = Depends(get_session_store),
    titles: PageTitleStore = Depends(get_page_title),
):
    state = store.set_view_mode(session_id, data.mode)
    return _screen(state, titles)


@router.get(
    "/sessions/{session_id}/render",
    response_model=WeekView | DayView | ListView,
)
async def render(
    session_id: str,
    mode: Optional[ViewMode] = None,
    day: Optional[date] = Query(None, description="Day of the visible week (day view)"),
    store: CalendarSessionStore = Depends(get_session_store),
):
    state = store.get(session_id)
    return render_view(mode or state.view_mode, state.slots, state.current_week, day=day)


# ── Reservation ──────────────────────────────────────────────────────────


@router.post("/sessions/{session_id}/select", response_model=ReservationDetails)
async def select_slot(
    session_id: str,
    data: SelectRequest,
    store: CalendarSessionStore = Depends(get_session_store),
    workflow: ReservationWorkflow = Depends(get_workflow),
    forms: ContactFormRegistry = Depends(get_contact_forms),
):
    state = store.get(session_id)
    slot = find_slot(state.slots, data.slot_id)
    if slot is None:
        raise SlotNotFoundError(f"Slot {data.slot_id} not found")

    reservation_state = workflow.select(session_id, slot)
    state.selected_slot_id = slot.id
    store.save(state)

    form = forms.get(session_id)
    return reservation_details(
        slot,
        get_subject(slot.subject_id),
        get_level(slot.level_id),
        state=reservation_state,
        contact=form.values if form else state.contact,
    )


@router.get("/sessions/{session_id}/details", response_model=ReservationDetails)
async def get_details(
    session_id: str,
    store: CalendarSessionStore = Depends(get_session_store),
    workflow: ReservationWorkflow = Depends(get_workflow),
    forms: ContactFormRegistry = Depends(get_contact_forms),
):
    state = store.get(session_id)
    slot = find_slot(state.slots, state.selected_slot_id) if state.selected_slot_id else None
    form = forms.get(session_id)
    return reservation_details(
        slot,
        get_subject(state.subject_id) if state.subject_id else None,
        get_level(state.level_id) if state.level_id else None,
        state=workflow.state_of(session_id, slot.id) if slot else ReservationState.UNSELECTED,
        contact=form.values if form else state.contact,
    )


@router.patch("/sessions/{session_id}/contact", response_model=BookingContactData)
async def update_contact(
    session_id: str,
    data: ContactPatch,
    store: CalendarSessionStore = Depends(get_session_store),
    workflow: ReservationWorkflow = Depends(get_workflow),
    forms: ContactFormRegistry = Depends(get_contact_forms),
):
    state = store.get(session_id)

    def persist(values: BookingContactData) -> None:
        try:
            current = store.get(session_id)
        except SessionNotFoundError:
            logger.info(f"Session {session_id} expired, dropping its contact form")
            forms.discard(session_id)
            workflow.forget(session_id)
            return
        current.contact = values
        store.save(current)

    form = forms.get_or_create(
        session_id,
        persist,
        delay=get_settings().form_debounce_seconds,
        initial=state.contact,
    )
    return form.update(data)


@router.post("/sessions/{session_id}/book", response_model=BookingResponse)
async def book_slot(
    session_id: str,
    data: BookingRequest,
    store: CalendarSessionStore = Depends(get_session_store),
    workflow: ReservationWorkflow = Depends(get_workflow),
    forms: ContactFormRegistry = Depends(get_contact_forms),
):
    state = store.get(session_id)

    form = forms.get(session_id)
    contact = form.flush() if form else state.contact

    result = await workflow.book(
        session_id,
        SessionSlotBoard(store, session_id),
        data.slot_id,
        contact,
        note=data.note,
    )

    state = store.get(session_id)
    state.selected_slot_id = result.lesson.id
    store.save(state)
    return result
