import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from maasta.core.error_codes import ARTIST_NOT_FOUND, BOOKING_STATE, NOT_AUTHORIZED
from maasta.core.exceptions import CustomHTTPException
from maasta.models.booking import Booking
from maasta.models.profile import Profile
from maasta.schemas.booking import BookingCreate, BookingParty, BookingRead
from maasta.schemas.enums import BookingStatus
from maasta.utils.validators import ensure_uuid

logger = logging.getLogger(__name__)

# Which side of a booking may move it into each status, and from where
TRANSITIONS = {
    BookingStatus.APPROVED.value: ("artist", {BookingStatus.PENDING.value}),
    BookingStatus.REJECTED.value: ("artist", {BookingStatus.PENDING.value}),
    BookingStatus.CANCELLED.value: ("booker", {BookingStatus.PENDING.value, BookingStatus.APPROVED.value}),
}


def _party(profile: Optional[Profile], profile_id: str, with_category: bool = False) -> BookingParty:
    if profile is None:
        return BookingParty(id=profile_id, full_name="Unknown")
    return BookingParty(
        id=profile.id,
        full_name=profile.full_name or "",
        profile_picture_url=profile.profile_picture_url,
        category=profile.category if with_category else None,
    )


def booking_to_read(
    booking: Booking,
    artist: Optional[BookingParty] = None,
    booker: Optional[BookingParty] = None,
) -> BookingRead:
    return BookingRead(**booking.model_dump(), artist=artist, booker=booker)


async def _profiles_by_id(db: AsyncSession, ids: Iterable[str]) -> Dict[str, Profile]:
    ids = list(set(ids))
    if not ids:
        return {}
    result = await db.execute(select(Profile).where(Profile.id.in_(ids)))
    return {profile.id: profile for profile in result.scalars().all()}


async def get_booking(db: AsyncSession, booking_id) -> Booking:
    booking_id = ensure_uuid(booking_id, "booking")
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise CustomHTTPException(404, "Booking not found")
    return booking


async def create_booking(db: AsyncSession, artist_id, booker_id: str, data: BookingCreate) -> BookingRead:
    artist_id = ensure_uuid(artist_id, "artist")
    if artist_id == str(booker_id):
        raise CustomHTTPException(400, "You cannot book yourself")
    artist = await db.get(Profile, artist_id)
    if artist is None:
        raise CustomHTTPException(404, f"Artist not found with ID: {artist_id}", error_code=ARTIST_NOT_FOUND)

    booking = Booking(artist_id=artist_id, booker_id=booker_id, **data.dict())
    try:
        db.add(booking)
        await db.commit()
        await db.refresh(booking)
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Database error creating booking for {artist_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to create booking")
    logger.info(f"Booking {booking.id} requested by {booker_id} for artist {artist_id}")
    return booking_to_read(booking, artist=_party(artist, artist_id, with_category=True))


async def list_bookings_for_artist(db: AsyncSession, artist_id: str) -> List[BookingRead]:
    """Requests received by the artist, each with the booker's card"""
    try:
        result = await db.execute(
            select(Booking).where(Booking.artist_id == artist_id).order_by(Booking.created_at.desc())
        )
        bookings = result.scalars().all()
        bookers = await _profiles_by_id(db, (b.booker_id for b in bookings))
    except SQLAlchemyError:
        logger.error(f"Database error listing bookings for artist {artist_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to retrieve bookings")
    return [booking_to_read(b, booker=_party(bookers.get(b.booker_id), b.booker_id)) for b in bookings]


async def list_bookings_for_user(db: AsyncSession, booker_id: str) -> List[BookingRead]:
    """Requests the user has sent, each with the artist's card"""
    try:
        result = await db.execute(
            select(Booking).where(Booking.booker_id == booker_id).order_by(Booking.created_at.desc())
        )
        bookings = result.scalars().all()
        artists = await _profiles_by_id(db, (b.artist_id for b in bookings))
    except SQLAlchemyError:
        logger.error(f"Database error listing bookings sent by {booker_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to retrieve bookings")
    return [
        booking_to_read(b, artist=_party(artists.get(b.artist_id), b.artist_id, with_category=True))
        for b in bookings
    ]


async def update_booking_status(db: AsyncSession, booking_id, user_id: str, status: str) -> Booking:
    """
    The artist approves or rejects a pending request; the booker cancels a
    pending or approved one.
    """
    booking = await get_booking(db, booking_id)
    side, allowed_from = TRANSITIONS[status]
    owner = booking.artist_id if side == "artist" else booking.booker_id
    if str(owner) != str(user_id):
        raise CustomHTTPException(403, f"Only the {side} can mark this booking {status}", error_code=NOT_AUTHORIZED)
    if booking.status not in allowed_from:
        raise CustomHTTPException(
            409,
            f"A {booking.status} booking cannot be {status}",
            error_code=BOOKING_STATE,
        )

    booking.status = status
    booking.updated_at = datetime.utcnow()
    try:
        db.add(booking)
        await db.commit()
        await db.refresh(booking)
    except SQLAlchemyError:
        await db.rollback()
        raise CustomHTTPException(500, "Failed to update booking status")
    logger.info(f"Booking {booking.id} is now {status}")
    return booking
