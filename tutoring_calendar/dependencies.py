# tutoring_calendar/dependencies.py

from fastapi import Depends, Request
from redis import Redis

from .config import get_settings
from .redis_client import get_redis
from .services.contact_form import ContactFormRegistry
from .services.reservation import ReservationWorkflow
from .services.session_store import CalendarSessionStore


def get_session_store(redis: Redis = Depends(get_redis)) -> CalendarSessionStore:
    return CalendarSessionStore(redis, ttl_seconds=get_settings().session_ttl_seconds)


def get_workflow(request: Request) -> ReservationWorkflow:
    return request.app.state.workflow


def get_contact_forms(request: Request) -> ContactFormRegistry:
    return request.app.state.contact_forms
