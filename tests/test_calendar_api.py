import asyncio
import json
import time
from datetime import date

import httpx
import pytest
from fastapi.testclient import TestClient

from tutoring_calendar.config import Settings
from tutoring_calendar.main import create_app
from tutoring_calendar.redis_client import get_redis
from tutoring_calendar.services.slots import week_start_for

from .conftest import MONDAY

SLOT_ID = "slot_math_basic_1_14"


def _new_session(client):
    response = client.post("/calendar/sessions")
    assert response.status_code == 201
    return response.json()["session"]["id"]


def _session_on_week(client, fake_redis, week=MONDAY):
    """Session pinned to a known week with math/basic chosen."""
    sid = _new_session(client)
    client.put(f"/calendar/sessions/{sid}/subject", json={"subject_id": "math"})
    key = f"calendar_session:{sid}"
    # pin the week without depending on today's date
    state = json.loads(fake_redis.data[key])
    state["current_week"] = week.isoformat()
    fake_redis.data[key] = json.dumps(state)
    client.put(f"/calendar/sessions/{sid}/level", json={"level_id": "basic"})
    return sid


def test_catalog(client):
    subjects = client.get("/catalog/subjects").json()
    levels = client.get("/catalog/levels").json()

    assert len(subjects) == 9
    assert subjects[0] == {"id": "math", "name": "Matematyka", "icon": "📐"}
    assert [lvl["id"] for lvl in levels] == ["basic", "intermediate", "advanced"]


def test_health(client):
    assert client.get("/health").json() == {"redis": True}


def test_stateless_slots(client):
    response = client.get(
        "/calendar/slots",
        params={"subject_id": "math", "level_id": "basic", "week": "2024-06-05"},
    )

    slots = response.json()
    assert len(slots) == 66
    assert slots[0]["id"] == "slot_math_basic_0_14"
    assert slots[0]["start"] == "2024-06-03T14:00:00"
    assert "status" not in slots[0]


def test_new_session_defaults(client, fake_redis):
    body = client.post("/calendar/sessions").json()

    assert body["title"] == "Kalendarz zajęć"
    session = body["session"]
    assert session["view_mode"] == "week"
    assert session["slots"] == []
    assert date.fromisoformat(session["current_week"]) == date.today()
    assert fake_redis.ttls[f"calendar_session:{session['id']}"] == 3600


def test_unknown_session_is_404(client):
    assert client.get("/calendar/sessions/nope").status_code == 404


def test_subject_then_level_generates_week(client, fake_redis):
    sid = _session_on_week(client, fake_redis)

    session = client.get(f"/calendar/sessions/{sid}").json()["session"]

    assert session["subject_id"] == "math"
    assert session["level_id"] == "basic"
    assert len(session["slots"]) == 66


def test_changing_subject_clears_level_and_slots(client, fake_redis):
    sid = _session_on_week(client, fake_redis)

    session = client.put(
        f"/calendar/sessions/{sid}/subject", json={"subject_id": "physics"}
    ).json()["session"]

    assert session["level_id"] is None
    assert session["slots"] == []


def test_unknown_subject_or_level_is_rejected(client):
    sid = _new_session(client)

    assert client.put(f"/calendar/sessions/{sid}/subject", json={"subject_id": "x"}).status_code == 422
    assert client.put(f"/calendar/sessions/{sid}/level", json={"level_id": "basic"}).status_code == 422


def test_navigation_regenerates_for_next_week(client, fake_redis):
    sid = _session_on_week(client, fake_redis)

    session = client.post(
        f"/calendar/sessions/{sid}/navigate", json={"direction": "next"}
    ).json()["session"]

    assert session["current_week"] == "2024-06-10"
    assert session["slots"][0]["start"] == "2024-06-10T14:00:00"

    session = client.post(
        f"/calendar/sessions/{sid}/navigate", json={"direction": "today"}
    ).json()["session"]
    assert week_start_for(date.fromisoformat(session["current_week"])) == week_start_for(date.today())


def test_render_modes(client, fake_redis):
    sid = _session_on_week(client, fake_redis)

    week = client.get(f"/calendar/sessions/{sid}/render").json()
    assert week["mode"] == "week"
    assert len(week["rows"]) == 15

    client.put(f"/calendar/sessions/{sid}/view", json={"mode": "list"})
    listing = client.get(f"/calendar/sessions/{sid}/render").json()
    assert listing["mode"] == "list"
    assert len(listing["entries"]) == 20

    day = client.get(
        f"/calendar/sessions/{sid}/render", params={"mode": "day", "day": "2024-06-08"}
    ).json()
    assert day["mode"] == "day"
    assert day["date"] == "2024-06-08"

    outside = client.get(
        f"/calendar/sessions/{sid}/render", params={"mode": "day", "day": "2024-07-01"}
    )
    assert outside.status_code == 422


def test_select_and_book_flow(client, fake_redis):
    sid = _session_on_week(client, fake_redis)

    details = client.post(f"/calendar/sessions/{sid}/select", json={"slot_id": SLOT_ID}).json()
    assert details["heading"] == "Rezerwacja lekcji"
    assert details["can_book"] is True
    assert details["state"] == "selected"

    client.patch(f"/calendar/sessions/{sid}/contact", json={"childName": "Jan"})
    client.patch(f"/calendar/sessions/{sid}/contact", json={"childName": "Jan Kowalski"})

    booked = client.post(
        f"/calendar/sessions/{sid}/book", json={"slot_id": SLOT_ID, "note": "Ułamki"}
    )
    assert booked.status_code == 200
    result = booked.json()
    assert result["state"] == "booked"
    assert result["lesson"]["id"] == "lesson_" + SLOT_ID
    assert result["lesson"]["status"] == "confirmed"
    assert result["notification"] == {"success": True, "error": None}

    session = client.get(f"/calendar/sessions/{sid}").json()["session"]
    ids = {s["id"] for s in session["slots"]}
    assert SLOT_ID not in ids
    assert "lesson_" + SLOT_ID in ids
    assert len(session["slots"]) == 66
    assert session["selected_slot_id"] == "lesson_" + SLOT_ID
    # booking flushed the debounced contact form
    assert session["contact"]["childName"] == "Jan Kowalski"

    details = client.get(f"/calendar/sessions/{sid}/details").json()
    assert details["heading"] == "Szczegóły rezerwacji"
    assert details["status_label"] == "Potwierdzona"


def test_booking_a_lesson_conflicts(client, fake_redis):
    sid = _session_on_week(client, fake_redis)
    client.post(f"/calendar/sessions/{sid}/book", json={"slot_id": SLOT_ID})

    again = client.post(f"/calendar/sessions/{sid}/book", json={"slot_id": "lesson_" + SLOT_ID})
    missing = client.post(f"/calendar/sessions/{sid}/book", json={"slot_id": "slot_nope"})

    assert again.status_code == 409
    assert missing.status_code == 404


def test_contact_is_persisted_after_debounce(client, fake_redis):
    sid = _new_session(client)

    response = client.patch(
        f"/calendar/sessions/{sid}/contact",
        json={"parentName": "Anna Kowalska", "email": "rodzic@example.com"},
    )
    assert response.json()["parentName"] == "Anna Kowalska"

    time.sleep(0.5)

    session = client.get(f"/calendar/sessions/{sid}").json()["session"]
    assert session["contact"]["parentName"] == "Anna Kowalska"
    assert session["contact"]["email"] == "rodzic@example.com"


def test_close_session(client):
    sid = _new_session(client)

    assert client.delete(f"/calendar/sessions/{sid}").status_code == 204
    assert client.get(f"/calendar/sessions/{sid}").status_code == 404
    assert client.delete(f"/calendar/sessions/{sid}").status_code == 404


@pytest.fixture
def slow_app(fake_redis):
    """App with a booking delay and debounce long enough to interleave requests."""
    app = create_app(Settings(
        webhook_url="",
        booking_delay_seconds=0.2,
        form_debounce_seconds=0.5,
    ))
    app.dependency_overrides[get_redis] = lambda: fake_redis
    return app


@pytest.mark.asyncio
async def test_view_switch_during_booking_keeps_the_lesson(slow_app):
    transport = httpx.ASGITransport(app=slow_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        sid = (await ac.post("/calendar/sessions")).json()["session"]["id"]
        await ac.put(f"/calendar/sessions/{sid}/subject", json={"subject_id": "math"})
        await ac.put(f"/calendar/sessions/{sid}/level", json={"level_id": "basic"})

        async def switch_view():
            await asyncio.sleep(0.05)
            return await ac.put(f"/calendar/sessions/{sid}/view", json={"mode": "list"})

        booked, switched = await asyncio.gather(
            ac.post(f"/calendar/sessions/{sid}/book", json={"slot_id": SLOT_ID}),
            switch_view(),
        )
        session = (await ac.get(f"/calendar/sessions/{sid}")).json()["session"]

    assert booked.json()["state"] == "booked"
    assert switched.status_code == 200
    ids = {s["id"] for s in session["slots"]}
    assert "lesson_" + SLOT_ID in ids
    assert SLOT_ID not in ids
    assert session["view_mode"] == "list"


def test_subject_change_cancels_pending_contact(slow_app):
    with TestClient(slow_app) as client:
        sid = _new_session(client)
        client.patch(f"/calendar/sessions/{sid}/contact", json={"childName": "Jan"})
        client.put(f"/calendar/sessions/{sid}/subject", json={"subject_id": "math"})

        time.sleep(0.8)

        session = client.get(f"/calendar/sessions/{sid}").json()["session"]
    assert session["contact"]["childName"] == ""


def test_unknown_subject_detail(client):
    sid = _new_session(client)

    response = client.put(f"/calendar/sessions/{sid}/subject", json={"subject_id": "x"})

    assert response.json() == {"detail": "Unknown subject: x"}


def test_expired_session_drops_its_contact_form(client, app, fake_redis, caplog):
    sid = _new_session(client)
    client.put(f"/calendar/sessions/{sid}/subject", json={"subject_id": "math"})
    client.put(f"/calendar/sessions/{sid}/level", json={"level_id": "basic"})
    client.post(f"/calendar/sessions/{sid}/select", json={"slot_id": SLOT_ID})
    client.patch(f"/calendar/sessions/{sid}/contact", json={"childName": "Jan"})

    fake_redis.delete(f"calendar_session:{sid}")
    time.sleep(0.5)

    assert app.state.contact_forms.get(sid) is None
    assert sid not in app.state.workflow.owners()
    assert "Debounced callback failed" not in caplog.text
