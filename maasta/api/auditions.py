import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from maasta.api.deps import get_background
from maasta.core.security import get_current_user_id
from maasta.crud.audition import (
    apply_to_audition,
    close_audition,
    create_audition,
    application_to_read,
    get_application,
    get_audition,
    get_audition_detail,
    list_applications,
    list_auditions,
    update_application_status,
    update_audition,
)
from maasta.crud.notification import notify_application_update, notify_in_background
from maasta.db.database import get_db, get_session_factory
from maasta.schemas.audition import (
    ApplicationCreate,
    ApplicationRead,
    ApplicationStatusUpdate,
    AuditionCreate,
    AuditionFilters,
    AuditionRead,
    AuditionUpdate,
)
from maasta.schemas.enums import AuditionStatus
from maasta.utils.background import BackgroundTaskRunner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auditions", tags=["Auditions"])


@router.get("", response_model=List[AuditionRead])
async def browse_auditions(
    status_filter: AuditionStatus = Query(AuditionStatus.OPEN, alias="status"),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    experience_level: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session_factory=Depends(get_session_factory),
):
    filters = AuditionFilters(
        status=status_filter.value,
        search=search,
        category=category,
        location=location,
        experience_level=experience_level,
    )
    return await list_auditions(session_factory, filters, limit=limit, offset=offset)


@router.post("", response_model=AuditionRead, status_code=status.HTTP_201_CREATED)
async def post_audition(
    payload: AuditionCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await create_audition(db, user_id, payload)


@router.get("/{audition_id}", response_model=AuditionRead)
async def audition_detail(audition_id: str, db: AsyncSession = Depends(get_db)):
    return await get_audition_detail(db, audition_id)


@router.patch("/{audition_id}", response_model=AuditionRead)
async def edit_audition(
    audition_id: str,
    payload: AuditionUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await update_audition(db, audition_id, user_id, payload)


@router.post("/{audition_id}/close", response_model=AuditionRead)
async def close(
    audition_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await close_audition(db, audition_id, user_id)


@router.post("/{audition_id}/apply", response_model=ApplicationRead, status_code=status.HTTP_201_CREATED)
async def apply(
    audition_id: str,
    payload: Optional[ApplicationCreate] = None,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    application = await apply_to_audition(db, audition_id, user_id, payload)
    return application_to_read(application)


@router.get("/{audition_id}/application", response_model=Optional[ApplicationRead])
async def my_application_status(
    audition_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """The caller's application for this audition, or null when there is none"""
    audition = await get_audition(db, audition_id)
    application = await get_application(db, audition.id, user_id)
    return application_to_read(application) if application else None


@router.get("/{audition_id}/applications", response_model=List[ApplicationRead])
async def audition_applications(
    audition_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await list_applications(db, audition_id, user_id)


@router.patch("/applications/{application_id}", response_model=ApplicationRead)
async def set_application_status(
    application_id: str,
    payload: ApplicationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    session_factory=Depends(get_session_factory),
    background: BackgroundTaskRunner = Depends(get_background),
):
    application = await update_application_status(db, application_id, user_id, payload)
    audition = await get_audition(db, application.audition_id)
    notify_in_background(
        background, session_factory, notify_application_update,
        application.artist_id, audition.id, audition.title, application.status,
    )
    return application
