"""
Booking requests: a user asks an artist to perform, the artist approves or
rejects, the booker may cancel. Each step notifies the other side.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from maasta.api.deps import get_background
from maasta.core.security import get_current_user_id
from maasta.crud.booking import (
    booking_to_read,
    create_booking,
    list_bookings_for_artist,
    list_bookings_for_user,
    update_booking_status,
)
from maasta.crud.notification import notify_booking_request, notify_booking_update, notify_in_background
from maasta.db.database import get_db, get_session_factory
from maasta.schemas.booking import BookingCreate, BookingRead, BookingStatusUpdate
from maasta.utils.background import BackgroundTaskRunner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/artists/{artist_id}", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def book_artist(
    artist_id: str,
    payload: BookingCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    session_factory=Depends(get_session_factory),
    background: BackgroundTaskRunner = Depends(get_background),
):
    booking = await create_booking(db, artist_id, user_id, payload)
    notify_in_background(
        background, session_factory, notify_booking_request,
        booking.artist_id, user_id, booking.id, booking.project_type,
    )
    return booking


@router.get("/received", response_model=List[BookingRead])
async def received_bookings(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await list_bookings_for_artist(db, user_id)


@router.get("/sent", response_model=List[BookingRead])
async def sent_bookings(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await list_bookings_for_user(db, user_id)


@router.patch("/{booking_id}/status", response_model=BookingRead)
async def set_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    session_factory=Depends(get_session_factory),
    background: BackgroundTaskRunner = Depends(get_background),
):
    booking = await update_booking_status(db, booking_id, user_id, payload.status)
    # A cancellation comes from the booker, so only the artist's decisions are reported back
    if booking.booker_id != user_id:
        notify_in_background(
            background, session_factory, notify_booking_update,
            booking.booker_id, booking.id, booking.project_type, booking.status,
        )
    return booking_to_read(booking)
