import logging
from datetime import datetime
from typing import Callable, List, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import or_, select

from maasta.core.error_codes import DUPLICATE_REGISTRATION, EVENT_FULL, FETCH_FAILED, NOT_AUTHORIZED
from maasta.core.exceptions import CustomHTTPException, FetchFailedError
from maasta.models.event import Event, EventRegistration
from maasta.models.profile import Profile
from maasta.schemas.enums import EventStatus
from maasta.schemas.event import AttendeeRead, EventCreate, EventFilters, EventRead, EventUpdate
from maasta.utils.fetch_fallback import fetch_with_fallback, map_fetch_result
from maasta.utils.listing_mappers import map_event_row, map_fallback_event, with_creator
from maasta.utils.validators import ensure_uuid

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncSession]


def _filtered(filters: EventFilters):
    stmt = select(Event).where(Event.status == EventStatus.PUBLISHED.value)
    if filters.category:
        stmt = stmt.where(Event.category == filters.category)
    if filters.is_online is not None:
        stmt = stmt.where(Event.is_online == filters.is_online)
    if filters.upcoming_only:
        stmt = stmt.where(Event.event_date >= datetime.utcnow())
    if filters.search:
        pattern = f"%{filters.search}%"
        stmt = stmt.where(or_(Event.title.ilike(pattern), Event.description.ilike(pattern)))
    return stmt.order_by(Event.created_at.desc())


async def list_events(
    session_factory: SessionFactory,
    filters: EventFilters,
    limit: int = 20,
    offset: int = 0,
) -> List[EventRead]:
    async def primary():
        async with session_factory() as db:
            result = await db.execute(
                _filtered(filters).options(selectinload(Event.creator)).offset(offset).limit(limit)
            )
            return [with_creator(e, include_creator=True) for e in result.scalars().all()]

    async def fallback():
        async with session_factory() as db:
            result = await db.execute(_filtered(filters).offset(offset).limit(limit))
            return [with_creator(e) for e in result.scalars().all()]

    try:
        result = await fetch_with_fallback(primary, fallback, label="event listing")
    except FetchFailedError as exc:
        raise CustomHTTPException(503, f"Failed to load events: {exc}", error_code=FETCH_FAILED)

    return map_fetch_result(
        result,
        lambda rows: [map_event_row(r) for r in rows],
        lambda rows: [map_fallback_event(r) for r in rows],
    )


async def get_event(db: AsyncSession, event_id, with_creator_profile: bool = False) -> Event:
    event_id = ensure_uuid(event_id, "event")
    stmt = select(Event).where(Event.id == event_id)
    if with_creator_profile:
        stmt = stmt.options(selectinload(Event.creator))
    result = await db.execute(stmt)
    event = result.scalars().first()
    if not event:
        raise CustomHTTPException(404, "Event not found")
    return event


async def get_event_detail(db: AsyncSession, event_id) -> EventRead:
    event = await get_event(db, event_id, with_creator_profile=True)
    return map_event_row(with_creator(event, include_creator=True))


def _ensure_creator(event: Event, user_id: str):
    if str(event.creator_id) != str(user_id):
        raise CustomHTTPException(403, "Only the organizer can manage this event", error_code=NOT_AUTHORIZED)


async def create_event(db: AsyncSession, creator_id: str, data: EventCreate) -> EventRead:
    event = Event(creator_id=creator_id, **data.dict())
    try:
        db.add(event)
        await db.commit()
        await db.refresh(event)
    except SQLAlchemyError:
        await db.rollback()
        logger.error("Database error creating event", exc_info=True)
        raise CustomHTTPException(500, "Failed to create event")
    logger.info(f"Event {event.id} created by {creator_id}")
    return await get_event_detail(db, event.id)


async def update_event(db: AsyncSession, event_id, user_id: str, data: EventUpdate) -> EventRead:
    event = await get_event(db, event_id)
    _ensure_creator(event, user_id)
    try:
        for key, value in data.dict(exclude_unset=True).items():
            setattr(event, key, value)
        event.updated_at = datetime.utcnow()
        db.add(event)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Database error updating event {event.id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to update event")
    return await get_event_detail(db, event.id)


async def count_registrations(db: AsyncSession, event_id: str) -> int:
    result = await db.execute(
        select(func.count(EventRegistration.id)).where(EventRegistration.event_id == event_id)
    )
    return result.scalar_one()


async def register_for_event(db: AsyncSession, event_id, user_id: str) -> EventRegistration:
    event = await get_event(db, event_id)

    if event.status != EventStatus.PUBLISHED.value:
        raise CustomHTTPException(400, "This event is not open for registration")
    if event.registration_deadline and event.registration_deadline < datetime.utcnow():
        raise CustomHTTPException(400, "Registration for this event has closed")

    existing = await db.execute(
        select(EventRegistration).where(
            EventRegistration.event_id == event.id,
            EventRegistration.user_id == user_id,
        )
    )
    if existing.scalars().first():
        raise CustomHTTPException(409, "You are already registered for this event", error_code=DUPLICATE_REGISTRATION)

    if event.max_attendees is not None and await count_registrations(db, event.id) >= event.max_attendees:
        raise CustomHTTPException(409, "This event is full", error_code=EVENT_FULL)

    registration = EventRegistration(event_id=event.id, user_id=user_id)
    try:
        db.add(registration)
        await db.commit()
        await db.refresh(registration)
    except IntegrityError:
        await db.rollback()
        raise CustomHTTPException(409, "You are already registered for this event", error_code=DUPLICATE_REGISTRATION)
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Database error registering for event {event.id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to register for event")
    logger.info(f"User {user_id} registered for event {event.id}")
    return registration


async def list_attendees(db: AsyncSession, event_id, user_id: str) -> List[AttendeeRead]:
    event = await get_event(db, event_id)
    _ensure_creator(event, user_id)
    result = await db.execute(
        select(EventRegistration, Profile)
        .join(Profile, Profile.id == EventRegistration.user_id)
        .where(EventRegistration.event_id == event.id)
        .order_by(EventRegistration.registered_at)
    )
    return [
        AttendeeRead(
            registration_id=registration.id,
            user_id=profile.id,
            full_name=profile.full_name,
            email=profile.email,
            profile_picture_url=profile.profile_picture_url,
            registered_at=registration.registered_at,
            attendance_status=registration.attendance_status,
        )
        for registration, profile in result.all()
    ]


async def get_created_events(db: AsyncSession, creator_id: str) -> List[Tuple[Event, int]]:
    counts = (
        select(EventRegistration.event_id, func.count(EventRegistration.id).label("n"))
        .group_by(EventRegistration.event_id)
        .subquery()
    )
    result = await db.execute(
        select(Event, func.coalesce(counts.c.n, 0))
        .options(selectinload(Event.creator))
        .outerjoin(counts, counts.c.event_id == Event.id)
        .where(Event.creator_id == creator_id)
        .order_by(Event.created_at.desc())
    )
    return [(event, count) for event, count in result.all()]


async def get_registered_events(db: AsyncSession, user_id: str) -> List[Event]:
    result = await db.execute(
        select(Event)
        .options(selectinload(Event.creator))
        .join(EventRegistration, EventRegistration.event_id == Event.id)
        .where(EventRegistration.user_id == user_id)
        .order_by(Event.event_date)
    )
    return result.scalars().all()
