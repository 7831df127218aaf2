import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import or_, select

from maasta.core.config import settings
from maasta.core.error_codes import ARTIST_NOT_FOUND, FETCH_FAILED
from maasta.core.exceptions import CustomHTTPException, FetchFailedError, RecordNotFoundError
from maasta.models.profile import Profile
from maasta.schemas.artist import ArtistFilters, ArtistRead, ArtistSummary
from maasta.schemas.enums import ProfileStatus
from maasta.schemas.profile import ProfileUpdate
from maasta.utils.artist_mappers import (
    RELATION_FIELDS,
    map_artist_row,
    map_artist_summary,
    map_fallback_artist,
    map_featured_artist,
    profile_to_row,
)
from maasta.utils.cache import CacheVersionManager
from maasta.utils.fetch_fallback import FullShape, fetch_with_fallback, map_fetch_result
from maasta.utils.validators import ensure_uuid

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncSession]


def artist_cache_key(artist_id: str) -> str:
    return f"artist:{artist_id}"


def _fetch_error(exc: FetchFailedError, what: str) -> CustomHTTPException:
    return CustomHTTPException(503, f"Failed to load {what}: {exc}", error_code=FETCH_FAILED)


async def fetch_artist_by_id(
    session_factory: SessionFactory,
    artist_id,
    cache: Optional[CacheVersionManager] = None,
) -> ArtistRead:
    """
    Load one artist with every profile section. When the joined query keeps
    failing, the bare profile row is served with empty sections instead.
    """
    artist_id = ensure_uuid(artist_id, "artist")
    key = artist_cache_key(artist_id)
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            return cached.model_copy(deep=True)

    async def primary():
        async with session_factory() as db:
            result = await db.execute(
                select(Profile)
                .options(*[selectinload(getattr(Profile, name)) for name in RELATION_FIELDS])
                .where(Profile.id == artist_id)
            )
            profile = result.scalars().first()
            if profile is None:
                raise RecordNotFoundError(f"No profile row for {artist_id}")
            return profile_to_row(profile, relations=RELATION_FIELDS)

    async def fallback():
        async with session_factory() as db:
            profile = await db.get(Profile, artist_id)
            if profile is None:
                raise RecordNotFoundError(f"No profile row for {artist_id}")
            return profile_to_row(profile)

    try:
        result = await fetch_with_fallback(primary, fallback, label=f"artist {artist_id}")
    except FetchFailedError as exc:
        if isinstance(exc.cause, RecordNotFoundError):
            raise CustomHTTPException(404, f"Artist not found with ID: {artist_id}", error_code=ARTIST_NOT_FOUND)
        raise _fetch_error(exc, "artist profile")

    artist = map_fetch_result(result, map_artist_row, map_fallback_artist)
    # Degraded rows are not cached so the next request retries the joined query
    if cache is not None and isinstance(result, FullShape):
        cache.set(key, artist.model_copy(deep=True))
    return artist


async def fetch_featured_artists(session_factory: SessionFactory, limit: int = 4) -> List[ArtistSummary]:
    def query():
        return (
            select(Profile)
            .where(
                Profile.status == ProfileStatus.ACTIVE.value,
                Profile.profile_picture_url.is_not(None),
            )
            .order_by(Profile.created_at.desc())
            .limit(limit)
        )

    async def primary():
        async with session_factory() as db:
            result = await db.execute(query().options(selectinload(Profile.special_skills)))
            return [profile_to_row(p, relations=("special_skills",)) for p in result.scalars().all()]

    async def fallback():
        async with session_factory() as db:
            result = await db.execute(query())
            return [profile_to_row(p) for p in result.scalars().all()]

    try:
        result = await fetch_with_fallback(
            primary,
            fallback,
            label="featured artists",
            timeout=settings.FEATURED_FETCH_TIMEOUT,
            max_retries=0,
        )
    except FetchFailedError as exc:
        raise _fetch_error(exc, "featured artists")

    return map_fetch_result(
        result,
        lambda rows: [map_featured_artist(r) for r in rows],
        lambda rows: [map_artist_summary(r) for r in rows],
    )


async def list_artists(
    session_factory: SessionFactory,
    filters: ArtistFilters,
    limit: int = 20,
    offset: int = 0,
    exclude_id: Optional[str] = None,
) -> List[ArtistSummary]:
    def query():
        stmt = select(Profile).where(Profile.status == ProfileStatus.ACTIVE.value)
        if exclude_id:
            stmt = stmt.where(Profile.id != exclude_id)
        if filters.search:
            pattern = f"%{filters.search}%"
            stmt = stmt.where(or_(Profile.full_name.ilike(pattern), Profile.bio.ilike(pattern)))
        if filters.category:
            stmt = stmt.where(Profile.category == filters.category)
        if filters.city:
            stmt = stmt.where(Profile.city.ilike(f"%{filters.city}%"))
        if filters.experience_level:
            stmt = stmt.where(Profile.experience_level == filters.experience_level)
        return stmt.order_by(Profile.created_at.desc()).offset(offset).limit(limit)

    async def primary():
        async with session_factory() as db:
            result = await db.execute(query().options(selectinload(Profile.special_skills)))
            return [profile_to_row(p, relations=("special_skills",)) for p in result.scalars().all()]

    async def fallback():
        async with session_factory() as db:
            result = await db.execute(query())
            return [profile_to_row(p) for p in result.scalars().all()]

    try:
        result = await fetch_with_fallback(primary, fallback, label="artist listing")
    except FetchFailedError as exc:
        raise _fetch_error(exc, "artists")

    return map_fetch_result(
        result,
        lambda rows: [map_featured_artist(r) for r in rows],
        lambda rows: [map_artist_summary(r) for r in rows],
    )


async def update_profile(
    db: AsyncSession,
    profile: Profile,
    data: ProfileUpdate,
    cache: Optional[CacheVersionManager] = None,
) -> Profile:
    try:
        update_data = data.dict(exclude_unset=True)
        for key, value in update_data.items():
            setattr(profile, key, value)
        profile.updated_at = datetime.utcnow()

        db.add(profile)
        await db.commit()
        await db.refresh(profile)
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Database error updating profile {profile.id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to update profile")

    if cache is not None:
        cache.invalidate(artist_cache_key(profile.id))
    logger.info(f"Profile {profile.id} updated: {sorted(update_data)}")
    return profile
