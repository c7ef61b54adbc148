# tutoring_calendar/services/contact_form.py
"""
Contact form state with debounced propagation.

Keystrokes update the form immediately; the values are pushed to the
``on_change`` callback only after a quiet period (300 ms by default).
"""

import logging
from typing import Awaitable, Callable, Optional, Union

from ..schemas.booking import BookingContactData, ContactPatch
from ..utils.debounce import Debouncer

logger = logging.getLogger(__name__)

OnChange = Callable[[BookingContactData], Union[None, Awaitable[None]]]


class ContactForm:
    def __init__(
        self,
        on_change: OnChange,
        delay: float = 0.3,
        initial: Optional[BookingContactData] = None,
    ):
        self._values = initial or BookingContactData()
        self._debouncer: Debouncer[BookingContactData] = Debouncer(delay, on_change)

    @property
    def values(self) -> BookingContactData:
        return self._values

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def update(self, patch: ContactPatch) -> BookingContactData:
        changes = patch.model_dump(exclude_none=True)
        self._values = self._values.model_copy(update=changes)
        self._debouncer.arm(self._values)
        return self._values

    def flush(self) -> BookingContactData:
        self._debouncer.flush()
        return self._values

    def cancel(self) -> None:
        """Drop a pending propagation; local values are kept."""
        self._debouncer.cancel()

    async def close(self) -> None:
        self._debouncer.cancel()
        await self._debouncer.drain()


class ContactFormRegistry:
    """In-process forms, one per calendar session."""

    def __init__(self):
        self._forms: dict[str, ContactForm] = {}

    def get(self, session_id: str) -> Optional[ContactForm]:
        return self._forms.get(session_id)

    def get_or_create(
        self,
        session_id: str,
        on_change: OnChange,
        delay: float,
        initial: Optional[BookingContactData] = None,
    ) -> ContactForm:
        form = self._forms.get(session_id)
        if form is None:
            form = ContactForm(on_change, delay=delay, initial=initial)
            self._forms[session_id] = form
            logger.debug(f"Contact form opened for session {session_id}")
        return form

    def cancel_pending(self, session_id: str) -> None:
        form = self._forms.get(session_id)
        if form is not None:
            form.cancel()

    def session_ids(self) -> list[str]:
        return list(self._forms)

    def discard(self, session_id: str) -> None:
        """Drop a form without waiting for callbacks already running."""
        form = self._forms.pop(session_id, None)
        if form is not None:
            form.cancel()

    async def close(self, session_id: str) -> None:
        form = self._forms.pop(session_id, None)
        if form is not None:
            await form.close()

    async def close_all(self) -> None:
        for session_id in list(self._forms):
            await self.close(session_id)
