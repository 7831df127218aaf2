from datetime import datetime, timedelta
from unittest.mock import patch

import pytest


def event_payload(**overrides):
    start = datetime.utcnow() + timedelta(days=10)
    payload = {
        "title": "Indie music night",
        "description": "Open mic for new bands",
        "location": "Bengaluru",
        "event_date": start.isoformat(),
        "date_start": start.isoformat(),
        "date_end": (start + timedelta(hours=4)).isoformat(),
        "category": "music",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
async def posted(client, make_profile, auth_headers):
    organizer = await make_profile(full_name="Stage Left Productions")
    response = await client.post("/api/events", json=event_payload(max_attendees=2), headers=auth_headers(organizer.id))
    assert response.status_code == 201
    return organizer, response.json()


@pytest.mark.asyncio
async def test_create_and_list_events(client, posted):
    organizer, event = posted

    assert event["status"] == "published"
    assert event["creator_profile"] == {"full_name": "Stage Left Productions"}

    listing = await client.get("/api/events", params={"upcoming_only": True})
    assert [e["id"] for e in listing.json()] == [event["id"]]
    assert listing.json()[0]["creator_profile"]["full_name"] == "Stage Left Productions"


@pytest.mark.asyncio
async def test_drafts_are_not_listed(client, make_profile, auth_headers):
    organizer = await make_profile()
    await client.post("/api/events", json=event_payload(status="draft"), headers=auth_headers(organizer.id))

    listing = await client.get("/api/events")
    assert listing.json() == []


@pytest.mark.asyncio
async def test_listing_falls_back_to_default_organizer(client, posted):
    _, event = posted

    with patch("maasta.crud.event.selectinload", side_effect=RuntimeError("join failed")):
        response = await client.get("/api/events")

    assert response.status_code == 200
    assert response.json()[0]["id"] == event["id"]
    assert response.json()[0]["creator_profile"] == {"full_name": "Event Organizer"}


@pytest.mark.asyncio
async def test_end_before_start_is_rejected(client, make_profile, auth_headers):
    organizer = await make_profile()
    start = datetime.utcnow() + timedelta(days=3)
    response = await client.post(
        "/api/events",
        json=event_payload(date_start=start.isoformat(), date_end=(start - timedelta(hours=1)).isoformat()),
        headers=auth_headers(organizer.id),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_registration_rules(client, posted, make_profile, auth_headers):
    _, event = posted
    first = await make_profile()
    second = await make_profile()
    third = await make_profile()
    url = f"/api/events/{event['id']}/register"

    registered = await client.post(url, headers=auth_headers(first.id))
    assert registered.status_code == 201
    assert registered.json()["user_id"] == first.id
    assert registered.json()["attendance_status"] == "registered"

    duplicate = await client.post(url, headers=auth_headers(first.id))
    assert duplicate.status_code == 409
    assert duplicate.json()["error_code"] == "duplicate_registration"

    assert (await client.post(url, headers=auth_headers(second.id))).status_code == 201

    full = await client.post(url, headers=auth_headers(third.id))
    assert full.status_code == 409
    assert full.json()["error_code"] == "event_full"


@pytest.mark.asyncio
async def test_registration_closes_at_deadline(client, make_profile, auth_headers):
    organizer = await make_profile()
    attendee = await make_profile()
    created = await client.post(
        "/api/events",
        json=event_payload(registration_deadline="2020-01-01T00:00:00+05:30"),
        headers=auth_headers(organizer.id),
    )

    response = await client.post(f"/api/events/{created.json()['id']}/register", headers=auth_headers(attendee.id))
    assert response.status_code == 400
    assert response.json()["detail"] == "Registration for this event has closed"


@pytest.mark.asyncio
async def test_attendees_are_organizer_only(client, posted, make_profile, auth_headers):
    organizer, event = posted
    guest = await make_profile(full_name="Front Row Fan")
    await client.post(f"/api/events/{event['id']}/register", headers=auth_headers(guest.id))

    forbidden = await client.get(f"/api/events/{event['id']}/attendees", headers=auth_headers(guest.id))
    assert forbidden.status_code == 403

    attendees = await client.get(f"/api/events/{event['id']}/attendees", headers=auth_headers(organizer.id))
    assert [a["full_name"] for a in attendees.json()] == ["Front Row Fan"]


@pytest.mark.asyncio
async def test_update_event(client, posted, make_profile, auth_headers):
    organizer, event = posted
    other = await make_profile()

    forbidden = await client.patch(f"/api/events/{event['id']}", json={"is_online": True}, headers=auth_headers(other.id))
    assert forbidden.status_code == 403

    updated = await client.patch(f"/api/events/{event['id']}", json={"is_online": True}, headers=auth_headers(organizer.id))
    assert updated.json()["is_online"] is True
