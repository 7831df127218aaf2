import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from maasta.api.deps import get_background
from maasta.core.security import get_current_user_id
from maasta.crud.event import (
    create_event,
    get_event,
    get_event_detail,
    list_attendees,
    list_events,
    register_for_event,
    update_event,
)
from maasta.crud.notification import notify_event_registration, notify_in_background
from maasta.db.database import get_db, get_session_factory
from maasta.schemas.event import (
    AttendeeRead,
    EventCreate,
    EventFilters,
    EventRead,
    EventUpdate,
    RegistrationRead,
)
from maasta.utils.background import BackgroundTaskRunner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=List[EventRead])
async def browse_events(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    is_online: Optional[bool] = Query(None),
    upcoming_only: bool = Query(False),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session_factory=Depends(get_session_factory),
):
    filters = EventFilters(search=search, category=category, is_online=is_online, upcoming_only=upcoming_only)
    return await list_events(session_factory, filters, limit=limit, offset=offset)


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def post_event(
    payload: EventCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await create_event(db, user_id, payload)


@router.get("/{event_id}", response_model=EventRead)
async def event_detail(event_id: str, db: AsyncSession = Depends(get_db)):
    return await get_event_detail(db, event_id)


@router.patch("/{event_id}", response_model=EventRead)
async def edit_event(
    event_id: str,
    payload: EventUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await update_event(db, event_id, user_id, payload)


@router.post("/{event_id}/register", response_model=RegistrationRead, status_code=status.HTTP_201_CREATED)
async def register(
    event_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    session_factory=Depends(get_session_factory),
    background: BackgroundTaskRunner = Depends(get_background),
):
    registration = await register_for_event(db, event_id, user_id)
    event = await get_event(db, registration.event_id)
    notify_in_background(background, session_factory, notify_event_registration, user_id, event.id, event.title)
    return RegistrationRead.model_validate(registration)


@router.get("/{event_id}/attendees", response_model=List[AttendeeRead])
async def attendees(
    event_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await list_attendees(db, event_id, user_id)
