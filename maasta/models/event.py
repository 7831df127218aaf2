from datetime import datetime
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

from maasta.models.profile import Profile, generate_uuid
from maasta.schemas.enums import EventStatus


class Event(SQLModel, table=True):
    __tablename__ = "events"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    title: str = Field(..., max_length=200)
    description: Optional[str] = None
    location: str
    event_date: datetime
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    category: Optional[str] = None
    status: str = Field(default=EventStatus.PUBLISHED.value, index=True)
    creator_id: str = Field(foreign_key="profiles.id", index=True)
    is_online: Optional[bool] = False
    ticket_type: Optional[str] = None
    ticket_price: Optional[float] = None
    max_attendees: Optional[int] = None
    registration_deadline: Optional[datetime] = None
    banner_url: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    creator: Optional[Profile] = Relationship()
    registrations: List["EventRegistration"] = Relationship(back_populates="event")


class EventRegistration(SQLModel, table=True):
    __tablename__ = "event_registrations"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_event_registration_user"),)

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    event_id: str = Field(foreign_key="events.id", index=True)
    user_id: str = Field(foreign_key="profiles.id", index=True)
    attendance_status: str = Field(default="registered")
    registered_at: datetime = Field(default_factory=datetime.utcnow)

    event: Optional[Event] = Relationship(back_populates="registrations")
    user: Optional[Profile] = Relationship()
