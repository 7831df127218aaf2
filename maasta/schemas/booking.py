from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, validator

from maasta.schemas.enums import ArtistCategory, BookingStatus
from maasta.utils.validators import to_naive_utc


class BookingCreate(BaseModel):
    category: ArtistCategory
    project_type: str = Field(..., min_length=1, max_length=200)
    event_date: datetime
    location: str = Field(..., min_length=1)
    duration: Optional[str] = None
    budget: Optional[float] = Field(default=None, ge=0)
    requirements: Optional[str] = None
    notes: Optional[str] = None
    technical_requirements: Optional[str] = None
    script_link: Optional[str] = None
    deliverables: Optional[str] = None
    deadline: Optional[datetime] = None
    num_shows: Optional[int] = Field(default=None, ge=1)
    rehearsal_required: Optional[bool] = None

    _naive_dates = validator("event_date", "deadline", allow_reuse=True)(to_naive_utc)

    @validator("project_type", "location")
    def strip_required_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    class Config:
        use_enum_values = True


class BookingStatusUpdate(BaseModel):
    status: BookingStatus

    @validator("status")
    def no_return_to_pending(cls, v):
        if v == BookingStatus.PENDING:
            raise ValueError("A booking cannot be moved back to pending")
        return v

    class Config:
        use_enum_values = True


class BookingParty(BaseModel):
    id: str
    full_name: str = ""
    profile_picture_url: Optional[str] = None
    category: Optional[str] = None


class BookingRead(BaseModel):
    id: str
    artist_id: str
    booker_id: str
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
    status: BookingStatus
    created_at: datetime
    updated_at: datetime

    artist: Optional[BookingParty] = None
    booker: Optional[BookingParty] = None
