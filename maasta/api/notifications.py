import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from maasta.core.security import get_current_user_id
from maasta.crud import notification as notif_crud
from maasta.db.database import get_db
from maasta.schemas.notification import MarkedRead, NotificationRead, NotificationResponse, UnreadCount

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationResponse)
async def get_notifications(
    limit: Optional[int] = Query(None, ge=1, le=200),
    unread_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Notifications, newest first, with the current unread count"""
    return {
        "unread_count": await notif_crud.get_unread_notification_count(db, user_id),
        "notifications": await notif_crud.get_user_notifications(db, user_id, limit, unread_only),
    }


@router.get("/unread-count", response_model=UnreadCount)
async def unread_count(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return {"count": await notif_crud.get_unread_notification_count(db, user_id)}


@router.put("/read-all", response_model=MarkedRead)
async def mark_all_notifications_as_read(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return {"updated": await notif_crud.mark_all_as_read(db, user_id)}


@router.put("/{notif_id}/read", response_model=NotificationRead)
async def mark_notification_as_read(
    notif_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await notif_crud.mark_as_read(db, notif_id, user_id)
