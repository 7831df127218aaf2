import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from maasta.core.error_codes import NOT_AUTHORIZED
from maasta.core.exceptions import CustomHTTPException
from maasta.models.notification import Notification
from maasta.models.profile import Profile
from maasta.schemas.enums import NotificationType
from maasta.schemas.notification import NotificationCreate
from maasta.utils.background import BackgroundTaskRunner
from maasta.utils.validators import ensure_uuid

logger = logging.getLogger(__name__)


async def create_notification(
    db: AsyncSession,
    notification_data: Union[Dict[str, Any], NotificationCreate],
) -> Notification:
    """
    Store one in-app notification. Accepts either a NotificationCreate or a
    plain dict with the same fields; invalid input raises a validation error.
    """
    if isinstance(notification_data, dict):
        notification_data = NotificationCreate(**notification_data)
    notification = Notification(**notification_data.dict())
    try:
        db.add(notification)
        await db.commit()
        await db.refresh(notification)
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to create notification for {notification_data.user_id}", exc_info=True)
        raise
    logger.debug(f"Notification {notification.id} ({notification.type}) for {notification.user_id}")
    return notification


async def _display_name(db: AsyncSession, profile_id: str) -> str:
    profile = await db.get(Profile, profile_id)
    return profile.full_name if profile and profile.full_name else "Someone"


async def notify_connection_event(db: AsyncSession, recipient_id: str, actor_id: str, matched: bool = False) -> Notification:
    name = await _display_name(db, actor_id)
    if matched:
        title, message = "Connection Accepted", f"{name} accepted your connection request"
    else:
        title, message = "New Connection Request", f"{name} sent you a connection request"
    return await create_notification(db, {
        "user_id": recipient_id,
        "type": NotificationType.NETWORKING,
        "title": title,
        "message": message,
        "related_id": actor_id,
        "related_type": "profile",
    })


async def notify_booking_request(db: AsyncSession, artist_id: str, booker_id: str, booking_id: str, project_type: str) -> Notification:
    name = await _display_name(db, booker_id)
    return await create_notification(db, {
        "user_id": artist_id,
        "type": NotificationType.BOOKING,
        "title": "New Booking Request",
        "message": f"{name} sent you a booking request for {project_type}",
        "related_id": booking_id,
        "related_type": "booking",
    })


async def notify_booking_update(db: AsyncSession, booker_id: str, booking_id: str, project_type: str, status: str) -> Notification:
    return await create_notification(db, {
        "user_id": booker_id,
        "type": NotificationType.BOOKING,
        "title": "Booking Update",
        "message": f'Your booking request for "{project_type}" has been {status}',
        "related_id": booking_id,
        "related_type": "booking",
    })


async def notify_application_update(db: AsyncSession, artist_id: str, audition_id: str, audition_title: str, status: str) -> Notification:
    return await create_notification(db, {
        "user_id": artist_id,
        "type": NotificationType.AUDITION,
        "title": "Application Update",
        "message": f'Your application for "{audition_title}" has been {status}',
        "related_id": audition_id,
        "related_type": "audition",
    })


async def notify_event_registration(db: AsyncSession, attendee_id: str, event_id: str, event_title: str) -> Notification:
    return await create_notification(db, {
        "user_id": attendee_id,
        "type": NotificationType.EVENT,
        "title": "Event Registration Confirmed",
        "message": f'You have successfully registered for "{event_title}"',
        "related_id": event_id,
        "related_type": "event",
    })


async def get_user_notifications(
    db: AsyncSession,
    user_id: str,
    limit: Optional[int] = None,
    unread_only: bool = False,
) -> List[Notification]:
    """Newest first"""
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.is_read == False)  # noqa: E712
    stmt = stmt.order_by(Notification.created_at.desc())
    if limit:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return result.scalars().all()


async def get_unread_notification_count(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.is_read == False,  # noqa: E712
        )
    )
    return result.scalar_one()


async def mark_as_read(db: AsyncSession, notif_id: str, user_id: str) -> Notification:
    notif_id = ensure_uuid(notif_id, "notification")
    notification = await db.get(Notification, notif_id)
    if notification is None:
        raise CustomHTTPException(404, "Notification not found")
    if str(notification.user_id) != str(user_id):
        raise CustomHTTPException(403, "Not authorized to update this notification", error_code=NOT_AUTHORIZED)
    if not notification.is_read:
        notification.is_read = True
        notification.updated_at = datetime.utcnow()
        try:
            db.add(notification)
            await db.commit()
            await db.refresh(notification)
        except SQLAlchemyError:
            await db.rollback()
            raise CustomHTTPException(500, "Failed to update notification")
    return notification


async def mark_all_as_read(db: AsyncSession, user_id: str) -> int:
    """Returns how many notifications changed"""
    try:
        result = await db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
            .values(is_read=True, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Database error marking notifications read for {user_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to update notifications")
    return result.rowcount


def notify_in_background(background: BackgroundTaskRunner, session_factory, notifier, *args, **kwargs):
    """Run one notify_* helper in its own session without holding up the caller"""

    async def send():
        async with session_factory() as db:
            await notifier(db, *args, **kwargs)

    return background.spawn(send, f"{getattr(notifier, '__name__', 'notification')} for {args[0]}")
