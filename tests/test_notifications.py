from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from maasta.crud.notification import (
    create_notification,
    get_unread_notification_count,
    notify_connection_event,
)
from maasta.models.notification import Notification
from maasta.schemas.enums import NotificationType


async def seed(db_session, user_id, count):
    """Notifications a minute apart, the last one newest"""
    start = datetime.utcnow() - timedelta(hours=1)
    for n in range(count):
        db_session.add(Notification(
            user_id=user_id,
            type=NotificationType.AUDITION.value,
            title=f"Update {n}",
            message=f"Message {n}",
            created_at=start + timedelta(minutes=n),
        ))
    await db_session.commit()


@pytest.mark.asyncio
async def test_listing_is_newest_first_with_unread_count(client, make_profile, auth_headers, db_session):
    me = await make_profile()
    other = await make_profile()
    await seed(db_session, me.id, 3)
    await seed(db_session, other.id, 1)

    response = await client.get("/api/notifications", headers=auth_headers(me.id))

    assert response.status_code == 200
    body = response.json()
    assert body["unread_count"] == 3
    assert [n["title"] for n in body["notifications"]] == ["Update 2", "Update 1", "Update 0"]
    assert {n["type"] for n in body["notifications"]} == {"audition"}

    limited = await client.get("/api/notifications", params={"limit": 1}, headers=auth_headers(me.id))
    assert len(limited.json()["notifications"]) == 1


@pytest.mark.asyncio
async def test_mark_one_and_mark_all(client, make_profile, auth_headers, db_session):
    me = await make_profile()
    other = await make_profile()
    await seed(db_session, me.id, 3)
    listed = (await client.get("/api/notifications", headers=auth_headers(me.id))).json()["notifications"]
    first = listed[0]["id"]

    forbidden = await client.put(f"/api/notifications/{first}/read", headers=auth_headers(other.id))
    assert forbidden.status_code == 403

    read = await client.put(f"/api/notifications/{first}/read", headers=auth_headers(me.id))
    assert read.status_code == 200
    assert read.json()["is_read"] is True
    # Marking an already read notification is harmless
    assert (await client.put(f"/api/notifications/{first}/read", headers=auth_headers(me.id))).status_code == 200

    unread = await client.get("/api/notifications/unread-count", headers=auth_headers(me.id))
    assert unread.json() == {"count": 2}

    unread_only = await client.get("/api/notifications", params={"unread_only": True}, headers=auth_headers(me.id))
    assert first not in [n["id"] for n in unread_only.json()["notifications"]]

    all_read = await client.put("/api/notifications/read-all", headers=auth_headers(me.id))
    assert all_read.json() == {"updated": 2}
    assert await get_unread_notification_count(db_session, me.id) == 0


@pytest.mark.asyncio
async def test_unknown_or_malformed_notification_id(client, make_profile, auth_headers):
    me = await make_profile()

    missing = await client.put("/api/notifications/5e4d3c2b-1a09-4f8e-9d7c-6b5a4f3e2d1c/read", headers=auth_headers(me.id))
    assert missing.status_code == 404

    malformed = await client.put("/api/notifications/undefined/read", headers=auth_headers(me.id))
    assert malformed.status_code == 422


@pytest.mark.asyncio
async def test_connection_notifications_name_the_actor(make_profile, db_session):
    recipient = await make_profile()
    actor = await make_profile(full_name="Kiran Dancer")

    request = await notify_connection_event(db_session, recipient.id, actor.id)
    accepted = await notify_connection_event(db_session, recipient.id, actor.id, matched=True)

    assert (request.title, request.message) == ("New Connection Request", "Kiran Dancer sent you a connection request")
    assert (accepted.title, accepted.message) == ("Connection Accepted", "Kiran Dancer accepted your connection request")
    assert request.type == "networking"
    assert request.related_id == actor.id


@pytest.mark.asyncio
async def test_swipes_notify_through_the_background_runner(swipe_service, background, make_profile, db_session):
    ua = await make_profile(full_name="Asha")
    ub = await make_profile(full_name="Bilal")

    await swipe_service.accept(ua.id, ub.id)
    await swipe_service.accept(ub.id, ua.id)
    await background.drain(1)

    assert await get_unread_notification_count(db_session, ub.id) == 1
    assert await get_unread_notification_count(db_session, ua.id) == 1


@pytest.mark.asyncio
async def test_application_decision_notifies_the_applicant(client, background, make_profile, auth_headers, db_session):
    poster = await make_profile()
    applicant = await make_profile()
    audition = await client.post("/api/auditions", json={"title": "Lead vocalist"}, headers=auth_headers(poster.id))
    application = await client.post(
        f"/api/auditions/{audition.json()['id']}/apply",
        json={},
        headers=auth_headers(applicant.id),
    )

    decided = await client.patch(
        f"/api/auditions/applications/{application.json()['id']}",
        json={"status": "shortlisted"},
        headers=auth_headers(poster.id),
    )
    assert decided.status_code == 200
    await background.drain(1)

    body = (await client.get("/api/notifications", headers=auth_headers(applicant.id))).json()
    assert [(n["title"], n["message"]) for n in body["notifications"]] == [
        ("Application Update", 'Your application for "Lead vocalist" has been shortlisted'),
    ]


@pytest.mark.asyncio
async def test_invalid_notification_type_is_rejected(db_session, make_profile):
    me = await make_profile()
    with pytest.raises(ValidationError):
        await create_notification(db_session, {"user_id": me.id, "type": "gossip", "title": "x", "message": "y"})


@pytest.mark.asyncio
async def test_notifications_require_a_token(client):
    assert (await client.get("/api/notifications")).status_code == 401
