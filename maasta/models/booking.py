from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from maasta.models.profile import generate_uuid
from maasta.schemas.enums import BookingStatus


class Booking(SQLModel, table=True):
    """A request from a booker to hire an artist"""
    __tablename__ = "bookings"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(foreign_key="profiles.id", index=True)
    booker_id: str = Field(foreign_key="profiles.id", index=True)
    category: str
    project_type: str
    event_date: datetime
    location: str
    duration: Optional[str] = None
    budget: Optional[float] = None
    requirements: Optional[str] = None
    notes: Optional[str] = None
    technical_requirements: Optional[str] = None
    script_link: Optional[str] = None
    deliverables: Optional[str] = None
    deadline: Optional[datetime] = None
    num_shows: Optional[int] = None
    rehearsal_required: Optional[bool] = None
    status: str = Field(default=BookingStatus.PENDING.value, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
