import logging
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from maasta.core.exceptions import CustomHTTPException
from maasta.crud.audition import get_created_auditions, get_my_applications
from maasta.crud.booking import list_bookings_for_artist, list_bookings_for_user
from maasta.crud.connection import count_connections
from maasta.crud.event import get_created_events, get_registered_events
from maasta.crud.notification import get_unread_notification_count
from maasta.crud.profile import fetch_artist_by_id
from maasta.schemas.dashboard import (
    DashboardApplication,
    DashboardAudition,
    DashboardEvent,
    DashboardRead,
)
from maasta.utils.cache import CacheVersionManager
from maasta.utils.listing_mappers import map_audition_row, map_event_row, with_creator
from maasta.utils.profile_strength import calculate_profile_strength

logger = logging.getLogger(__name__)


async def build_dashboard(
    db: AsyncSession,
    session_factory: Callable[[], AsyncSession],
    user_id: str,
    cache: Optional[CacheVersionManager] = None,
) -> DashboardRead:
    created_auditions = await get_created_auditions(db, user_id)
    applications = await get_my_applications(db, user_id)
    created_events = await get_created_events(db, user_id)
    registered = await get_registered_events(db, user_id)
    counts = await count_connections(db, user_id)
    bookings_received = await list_bookings_for_artist(db, user_id)
    bookings_sent = await list_bookings_for_user(db, user_id)
    unread = await get_unread_notification_count(db, user_id)

    strength = None
    try:
        artist = await fetch_artist_by_id(session_factory, user_id, cache)
        strength = calculate_profile_strength(artist)
    except CustomHTTPException as e:
        logger.warning(f"Dashboard for {user_id} served without profile strength: {e.detail}")

    return DashboardRead(
        my_auditions=[
            DashboardAudition(audition=map_audition_row(with_creator(audition)), application_count=count)
            for audition, count in created_auditions
        ],
        my_applications=[
            DashboardApplication(
                application_id=application.id,
                audition_id=application.audition_id,
                audition_title=title,
                status=application.status,
                application_date=application.application_date,
            )
            for application, title in applications
        ],
        my_events=[
            DashboardEvent(event=map_event_row(with_creator(event, include_creator=True)), registration_count=count)
            for event, count in created_events
        ],
        registered_events=[map_event_row(with_creator(event, include_creator=True)) for event in registered],
        bookings_received=bookings_received,
        bookings_sent=bookings_sent,
        connections=counts,
        unread_notifications=unread,
        profile_strength=strength,
    )
