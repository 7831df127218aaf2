from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, validator

from maasta.schemas.enums import EventStatus
from maasta.utils.validators import to_naive_utc

EVENT_DATE_FIELDS = ("event_date", "date_start", "date_end", "registration_deadline")


class OrganizerProfile(BaseModel):
    full_name: str


class EventBase(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = None
    location: str = Field(..., min_length=1)
    event_date: datetime
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    category: Optional[str] = None
    is_online: bool = False
    ticket_type: Optional[str] = None
    ticket_price: Optional[float] = Field(default=None, ge=0)
    max_attendees: Optional[int] = Field(default=None, ge=1)
    registration_deadline: Optional[datetime] = None
    banner_url: Optional[str] = None

    _naive_dates = validator(*EVENT_DATE_FIELDS, allow_reuse=True)(to_naive_utc)

    @validator("date_end")
    def end_after_start(cls, v, values):
        start = values.get("date_start")
        if v and start and v < start:
            raise ValueError("date_end cannot be before date_start")
        return v


class EventCreate(EventBase):
    status: EventStatus = EventStatus.PUBLISHED

    class Config:
        use_enum_values = True


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    event_date: Optional[datetime] = None
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    category: Optional[str] = None
    status: Optional[EventStatus] = None
    is_online: Optional[bool] = None
    ticket_type: Optional[str] = None
    ticket_price: Optional[float] = Field(default=None, ge=0)
    max_attendees: Optional[int] = Field(default=None, ge=1)
    registration_deadline: Optional[datetime] = None
    banner_url: Optional[str] = None

    _naive_dates = validator(*EVENT_DATE_FIELDS, allow_reuse=True)(to_naive_utc)

    class Config:
        use_enum_values = True


class EventRead(BaseModel):
    id: str
    title: str
    description: str = ""
    location: str
    event_date: datetime
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    category: Optional[str] = None
    status: str
    creator_id: Optional[str] = None
    creator_profile: OrganizerProfile
    is_online: bool = False
    ticket_type: Optional[str] = None
    ticket_price: Optional[float] = None
    max_attendees: Optional[int] = None
    registration_deadline: Optional[datetime] = None
    banner_url: Optional[str] = None
    created_at: Optional[datetime] = None


class EventFilters(BaseModel):
    search: Optional[str] = None
    category: Optional[str] = None
    is_online: Optional[bool] = None
    upcoming_only: bool = False


class RegistrationRead(BaseModel):
    id: str
    event_id: str
    user_id: str
    attendance_status: str
    registered_at: datetime

    class Config:
        from_attributes = True


class AttendeeRead(BaseModel):
    registration_id: str
    user_id: str
    full_name: str
    email: Optional[str] = None
    profile_picture_url: Optional[str] = None
    registered_at: datetime
    attendance_status: str
