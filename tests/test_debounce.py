import asyncio

import pytest

from tutoring_calendar.schemas.booking import BookingContactData, ContactPatch
from tutoring_calendar.services.contact_form import ContactForm, ContactFormRegistry
from tutoring_calendar.utils.debounce import Debouncer


@pytest.mark.asyncio
async def test_rapid_updates_propagate_once_with_final_values():
    calls = []
    form = ContactForm(calls.append, delay=0.3)

    form.update(ContactPatch(child_name="Jan"))
    await asyncio.sleep(0.1)
    form.update(ContactPatch(child_name="Jan Kowalski"))
    await asyncio.sleep(0.5)

    assert len(calls) == 1
    assert calls[0].child_name == "Jan Kowalski"


@pytest.mark.asyncio
async def test_updates_after_quiet_period_propagate_separately():
    calls = []
    form = ContactForm(calls.append, delay=0.02)

    form.update(ContactPatch(email="a@example.com"))
    await asyncio.sleep(0.1)
    form.update(ContactPatch(phone="600"))
    await asyncio.sleep(0.1)

    assert [(c.email, c.phone) for c in calls] == [
        ("a@example.com", ""),
        ("a@example.com", "600"),
    ]


@pytest.mark.asyncio
async def test_cancel_drops_pending_but_keeps_values():
    calls = []
    form = ContactForm(calls.append, delay=0.02)

    form.update(ContactPatch(parent_name="Anna"))
    form.cancel()
    await asyncio.sleep(0.1)

    assert calls == []
    assert form.values.parent_name == "Anna"
    assert not form.pending


@pytest.mark.asyncio
async def test_flush_fires_immediately():
    calls = []
    form = ContactForm(calls.append, delay=10)

    form.update(ContactPatch(child_name="Ola"))
    values = form.flush()

    assert calls == [values]
    assert not form.pending


@pytest.mark.asyncio
async def test_async_callback_is_awaited_on_drain():
    seen = []

    async def on_change(values: BookingContactData):
        await asyncio.sleep(0)
        seen.append(values.child_name)

    debouncer = Debouncer(0.01, on_change)
    debouncer.arm(BookingContactData(child_name="Zosia"))
    await asyncio.sleep(0.05)
    await debouncer.drain()

    assert seen == ["Zosia"]


@pytest.mark.asyncio
async def test_failing_callback_does_not_break_the_timer():
    def boom(_):
        raise RuntimeError("store down")

    debouncer = Debouncer(0.01, boom)
    debouncer.arm("x")
    await asyncio.sleep(0.05)

    assert not debouncer.pending


@pytest.mark.asyncio
async def test_registry_close_cancels_pending():
    calls = []
    registry = ContactFormRegistry()
    form = registry.get_or_create("s1", calls.append, delay=0.02)

    form.update(ContactPatch(child_name="Jan"))
    await registry.close("s1")
    await asyncio.sleep(0.05)

    assert calls == []
    assert registry.get("s1") is None
