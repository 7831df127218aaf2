from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from maasta.schemas.enums import NotificationType


class NotificationCreate(BaseModel):
    user_id: str
    type: NotificationType
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    related_id: Optional[str] = None
    related_type: Optional[str] = None

    class Config:
        use_enum_values = True


class NotificationRead(BaseModel):
    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    is_read: bool
    related_id: Optional[str] = None
    related_type: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationResponse(BaseModel):
    unread_count: int
    notifications: List[NotificationRead]


class UnreadCount(BaseModel):
    count: int


class MarkedRead(BaseModel):
    updated: int
