from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from maasta.schemas.artist import ProfileStrength
from maasta.schemas.audition import AuditionRead
from maasta.schemas.booking import BookingRead
from maasta.schemas.connection import ConnectionCounts
from maasta.schemas.event import EventRead


class DashboardAudition(BaseModel):
    audition: AuditionRead
    application_count: int = 0


class DashboardApplication(BaseModel):
    application_id: str
    audition_id: str
    audition_title: str
    status: str
    application_date: datetime


class DashboardEvent(BaseModel):
    event: EventRead
    registration_count: int = 0


class DashboardRead(BaseModel):
    my_auditions: List[DashboardAudition] = Field(default_factory=list)
    my_applications: List[DashboardApplication] = Field(default_factory=list)
    my_events: List[DashboardEvent] = Field(default_factory=list)
    registered_events: List[EventRead] = Field(default_factory=list)
    bookings_received: List[BookingRead] = Field(default_factory=list)
    bookings_sent: List[BookingRead] = Field(default_factory=list)
    connections: ConnectionCounts = Field(default_factory=ConnectionCounts)
    unread_notifications: int = 0
    profile_strength: Optional[ProfileStrength] = None
