from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from maasta.models.profile import generate_uuid


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    user_id: str = Field(foreign_key="profiles.id", index=True)
    type: str
    title: str
    message: str
    is_read: bool = Field(default=False, index=True)
    related_id: Optional[str] = None
    related_type: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
