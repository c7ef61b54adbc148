# tutoring_calendar/services/session_sweeper.py
"""
Expired session sweeper.

Sessions normally end by Redis TTL expiry, not by DELETE. Contact forms and
reservation states kept in-process for such sessions are dropped here.

Runs as an asyncio task in the app lifespan.
"""

import asyncio
import logging
from typing import Callable

from .contact_form import ContactFormRegistry
from .reservation import ReservationWorkflow
from .session_store import CalendarSessionStore

logger = logging.getLogger(__name__)


def evict_expired_sessions(
    store: CalendarSessionStore,
    forms: ContactFormRegistry,
    workflow: ReservationWorkflow,
) -> int:
    """Drop in-process state of sessions gone from Redis. Returns how many."""
    known = set(forms.session_ids()) | workflow.owners()
    expired = [sid for sid in known if not store.exists(sid)]

    for session_id in expired:
        forms.discard(session_id)
        workflow.forget(session_id)

    if expired:
        logger.info(f"Evicted state of {len(expired)} expired calendar sessions")
    return len(expired)


async def session_sweeper_loop(
    store_factory: Callable[[], CalendarSessionStore],
    forms: ContactFormRegistry,
    workflow: ReservationWorkflow,
    interval: float,
) -> None:
    logger.info("session_sweeper_loop started")

    try:
        while True:
            await asyncio.sleep(interval)
            try:
                evict_expired_sessions(store_factory(), forms, workflow)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("session_sweeper_loop error")
    except asyncio.CancelledError:
        logger.info("session_sweeper_loop cancelled")
