# tutoring_calendar/services/session_store.py
"""
Calendar session state in Redis.

Key: calendar_session:{uuid}, JSON body, sliding TTL (default 1 hour).
Nothing here is persisted beyond the TTL; booked lessons survive only as
long as the session does.
"""

import logging
from datetime import date
from typing import Optional
from uuid import uuid4

from redis import Redis

from ..errors import SessionNotFoundError
from ..schemas.calendar import ViewMode
from ..schemas.session import CalendarSessionState
from ..schemas.slots import TimeSlot

logger = logging.getLogger(__name__)

SESSION_PREFIX = "calendar_session"
SESSION_TTL = 3600  # 1 hour


def _key(session_id: str) -> str:
    return f"{SESSION_PREFIX}:{session_id}"


class CalendarSessionStore:
    def __init__(self, redis: Redis, ttl_seconds: int = SESSION_TTL):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def create(self, today: Optional[date] = None) -> CalendarSessionState:
        state = CalendarSessionState(
            id=str(uuid4()),
            current_week=today or date.today(),
        )
        self.save(state)
        logger.info(f"Calendar session created: {state.id}")
        return state

    def get(self, session_id: str) -> CalendarSessionState:
        raw = self.redis.get(_key(session_id))
        if not raw:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return CalendarSessionState.model_validate_json(raw)

    def save(self, state: CalendarSessionState) -> None:
        self.redis.setex(_key(state.id), self.ttl_seconds, state.model_dump_json())

    def set_view_mode(self, session_id: str, mode: ViewMode) -> CalendarSessionState:
        """Change only the view mode; slots are written back as read."""
        state = self.get(session_id)
        state.view_mode = mode
        self.save(state)
        return state

    def exists(self, session_id: str) -> bool:
        return bool(self.redis.exists(_key(session_id)))

    def delete(self, session_id: str) -> bool:
        return bool(self.redis.delete(_key(session_id)))


class SessionSlotBoard:
    """Slot board backed by one session; reads fresh state on every load."""

    def __init__(self, store: CalendarSessionStore, session_id: str):
        self.store = store
        self.session_id = session_id

    async def load(self) -> list[TimeSlot]:
        return list(self.store.get(self.session_id).slots)

    async def replace(self, slots: list[TimeSlot]) -> None:
        state = self.store.get(self.session_id)
        state.slots = list(slots)
        self.store.save(state)
