import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import or_, select

from maasta.core.error_codes import DUPLICATE_APPLICATION, FETCH_FAILED, NOT_AUTHORIZED
from maasta.core.exceptions import CustomHTTPException, FetchFailedError
from maasta.models.audition import Audition, AuditionApplication
from maasta.models.profile import Profile
from maasta.schemas.audition import (
    ApplicantSummary,
    ApplicationCreate,
    ApplicationRead,
    ApplicationStatusUpdate,
    AuditionCreate,
    AuditionFilters,
    AuditionRead,
    AuditionUpdate,
)
from maasta.schemas.enums import AuditionStatus
from maasta.utils.fetch_fallback import fetch_with_fallback, map_fetch_result
from maasta.utils.listing_mappers import map_audition_row, map_fallback_audition, with_creator
from maasta.utils.validators import ensure_uuid

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncSession]


def _filtered(filters: AuditionFilters):
    stmt = select(Audition)
    if filters.status:
        stmt = stmt.where(Audition.status == filters.status)
    if filters.category:
        stmt = stmt.where(Audition.category == filters.category)
    if filters.location:
        stmt = stmt.where(Audition.location.ilike(f"%{filters.location}%"))
    if filters.experience_level:
        stmt = stmt.where(Audition.experience_level == filters.experience_level)
    if filters.search:
        pattern = f"%{filters.search}%"
        stmt = stmt.where(or_(Audition.title.ilike(pattern), Audition.description.ilike(pattern)))
    return stmt.order_by(Audition.created_at.desc())


async def list_auditions(
    session_factory: SessionFactory,
    filters: AuditionFilters,
    limit: int = 20,
    offset: int = 0,
) -> List[AuditionRead]:
    """Listing with the poster's profile; without it when the joined query keeps failing"""

    async def primary():
        async with session_factory() as db:
            result = await db.execute(
                _filtered(filters).options(selectinload(Audition.creator)).offset(offset).limit(limit)
            )
            return [with_creator(a, include_creator=True) for a in result.scalars().all()]

    async def fallback():
        async with session_factory() as db:
            result = await db.execute(_filtered(filters).offset(offset).limit(limit))
            return [with_creator(a) for a in result.scalars().all()]

    try:
        result = await fetch_with_fallback(primary, fallback, label="audition listing")
    except FetchFailedError as exc:
        raise CustomHTTPException(503, f"Failed to load auditions: {exc}", error_code=FETCH_FAILED)

    return map_fetch_result(
        result,
        lambda rows: [map_audition_row(r) for r in rows],
        lambda rows: [map_fallback_audition(r) for r in rows],
    )


async def get_audition(db: AsyncSession, audition_id, with_poster: bool = False) -> Audition:
    audition_id = ensure_uuid(audition_id, "audition")
    stmt = select(Audition).where(Audition.id == audition_id)
    if with_poster:
        stmt = stmt.options(selectinload(Audition.creator))
    result = await db.execute(stmt)
    audition = result.scalars().first()
    if not audition:
        raise CustomHTTPException(404, "Audition not found")
    return audition


async def get_audition_detail(db: AsyncSession, audition_id) -> AuditionRead:
    audition = await get_audition(db, audition_id, with_poster=True)
    return map_audition_row(with_creator(audition, include_creator=True))


def _ensure_creator(audition: Audition, user_id: str):
    if str(audition.creator_id) != str(user_id):
        raise CustomHTTPException(403, "Only the creator can manage this audition", error_code=NOT_AUTHORIZED)


async def create_audition(db: AsyncSession, creator_id: str, data: AuditionCreate) -> AuditionRead:
    audition = Audition(creator_id=creator_id, **data.dict())
    try:
        db.add(audition)
        await db.commit()
        await db.refresh(audition)
    except SQLAlchemyError:
        await db.rollback()
        logger.error("Database error creating audition", exc_info=True)
        raise CustomHTTPException(500, "Failed to create audition")
    logger.info(f"Audition {audition.id} created by {creator_id}")
    return await get_audition_detail(db, audition.id)


async def update_audition(db: AsyncSession, audition_id, user_id: str, data: AuditionUpdate) -> AuditionRead:
    audition = await get_audition(db, audition_id)
    _ensure_creator(audition, user_id)
    try:
        for key, value in data.dict(exclude_unset=True).items():
            setattr(audition, key, value)
        audition.updated_at = datetime.utcnow()
        db.add(audition)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Database error updating audition {audition.id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to update audition")
    return await get_audition_detail(db, audition.id)


async def close_audition(db: AsyncSession, audition_id, user_id: str) -> AuditionRead:
    audition = await get_audition(db, audition_id)
    _ensure_creator(audition, user_id)
    status = AuditionStatus.CLOSED.value
    audition.status = status
    audition.updated_at = datetime.utcnow()
    try:
        db.add(audition)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise CustomHTTPException(500, "Failed to update audition status")
    logger.info(f"Audition {audition.id} is now {status}")
    return await get_audition_detail(db, audition.id)


async def apply_to_audition(
    db: AsyncSession,
    audition_id,
    artist_id: str,
    data: Optional[ApplicationCreate] = None,
) -> AuditionApplication:
    audition = await get_audition(db, audition_id)

    if audition.status != AuditionStatus.OPEN.value:
        raise CustomHTTPException(400, "This audition is no longer accepting applications")
    if audition.deadline and audition.deadline < datetime.utcnow():
        raise CustomHTTPException(400, "The application deadline has passed")
    if str(audition.creator_id) == str(artist_id):
        raise CustomHTTPException(400, "You cannot apply to your own audition")

    existing = await get_application(db, audition.id, artist_id)
    if existing:
        raise CustomHTTPException(409, "You have already applied for this audition", error_code=DUPLICATE_APPLICATION)

    application = AuditionApplication(
        audition_id=audition.id,
        artist_id=artist_id,
        notes=data.notes if data else None,
    )
    try:
        db.add(application)
        await db.commit()
        await db.refresh(application)
    except IntegrityError:
        await db.rollback()
        raise CustomHTTPException(409, "You have already applied for this audition", error_code=DUPLICATE_APPLICATION)
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Database error applying to audition {audition.id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to submit application")
    logger.info(f"Artist {artist_id} applied to audition {audition.id}")
    return application


async def get_application(db: AsyncSession, audition_id: str, artist_id: str) -> Optional[AuditionApplication]:
    result = await db.execute(
        select(AuditionApplication).where(
            AuditionApplication.audition_id == audition_id,
            AuditionApplication.artist_id == artist_id,
        )
    )
    return result.scalars().first()


def application_to_read(application: AuditionApplication, artist: Optional[Profile] = None) -> ApplicationRead:
    summary = None
    if artist is not None:
        summary = ApplicantSummary(
            id=artist.id,
            full_name=artist.full_name,
            email=artist.email,
            profile_picture_url=artist.profile_picture_url,
        )
    return ApplicationRead(
        id=application.id,
        audition_id=application.audition_id,
        artist_id=application.artist_id,
        status=application.status,
        notes=application.notes,
        organizer_notes=application.organizer_notes,
        application_date=application.application_date,
        artist=summary,
    )


async def list_applications(db: AsyncSession, audition_id, user_id: str) -> List[ApplicationRead]:
    audition = await get_audition(db, audition_id)
    _ensure_creator(audition, user_id)
    result = await db.execute(
        select(AuditionApplication, Profile)
        .join(Profile, Profile.id == AuditionApplication.artist_id)
        .where(AuditionApplication.audition_id == audition.id)
        .order_by(AuditionApplication.application_date.desc())
    )
    return [application_to_read(application, artist) for application, artist in result.all()]


async def update_application_status(
    db: AsyncSession,
    application_id,
    user_id: str,
    data: ApplicationStatusUpdate,
) -> ApplicationRead:
    application_id = ensure_uuid(application_id, "application")
    application = await db.get(AuditionApplication, application_id)
    if not application:
        raise CustomHTTPException(404, "Application not found")
    audition = await get_audition(db, application.audition_id)
    _ensure_creator(audition, user_id)

    application.status = data.status
    if data.organizer_notes is not None:
        application.organizer_notes = data.organizer_notes
    try:
        db.add(application)
        await db.commit()
        await db.refresh(application)
    except SQLAlchemyError:
        await db.rollback()
        raise CustomHTTPException(500, "Failed to update application status")
    return application_to_read(application)


async def get_my_applications(db: AsyncSession, artist_id: str) -> List[Tuple[AuditionApplication, str]]:
    result = await db.execute(
        select(AuditionApplication, Audition.title)
        .join(Audition, Audition.id == AuditionApplication.audition_id)
        .where(AuditionApplication.artist_id == artist_id)
        .order_by(AuditionApplication.application_date.desc())
    )
    return [(application, title) for application, title in result.all()]


async def get_created_auditions(db: AsyncSession, creator_id: str) -> List[Tuple[Audition, int]]:
    counts = (
        select(AuditionApplication.audition_id, func.count(AuditionApplication.id).label("n"))
        .group_by(AuditionApplication.audition_id)
        .subquery()
    )
    result = await db.execute(
        select(Audition, func.coalesce(counts.c.n, 0))
        .outerjoin(counts, counts.c.audition_id == Audition.id)
        .where(Audition.creator_id == creator_id)
        .order_by(Audition.created_at.desc())
    )
    return [(audition, count) for audition, count in result.all()]
