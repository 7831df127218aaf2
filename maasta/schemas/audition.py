from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, validator

from maasta.schemas.enums import ApplicationStatus, ArtistCategory, ExperienceLevel
from maasta.utils.validators import to_naive_utc


class PosterProfile(BaseModel):
    id: str
    full_name: str
    profile_picture: Optional[str] = None


class AuditionBase(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    deadline: Optional[datetime] = None
    audition_date: Optional[datetime] = None
    category: Optional[ArtistCategory] = None
    experience_level: Optional[ExperienceLevel] = None
    gender: Optional[str] = None
    age_range: Optional[str] = None
    compensation: Optional[str] = None
    requirements: Optional[str] = None
    project_details: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    payment_required: bool = False
    payment_amount: Optional[float] = Field(default=None, ge=0)

    _naive_dates = validator("deadline", "audition_date", allow_reuse=True)(to_naive_utc)

    @validator("tags", pre=True)
    def normalize_tags(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [tag.strip() for tag in v if tag and tag.strip()]

    class Config:
        use_enum_values = True


class AuditionCreate(AuditionBase):
    pass


class AuditionUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    deadline: Optional[datetime] = None
    audition_date: Optional[datetime] = None
    category: Optional[ArtistCategory] = None
    experience_level: Optional[ExperienceLevel] = None
    gender: Optional[str] = None
    age_range: Optional[str] = None
    compensation: Optional[str] = None
    requirements: Optional[str] = None
    project_details: Optional[str] = None
    tags: Optional[List[str]] = None
    payment_required: Optional[bool] = None
    payment_amount: Optional[float] = Field(default=None, ge=0)

    _naive_dates = validator("deadline", "audition_date", allow_reuse=True)(to_naive_utc)

    class Config:
        use_enum_values = True


class AuditionRead(BaseModel):
    id: str
    title: str
    description: str = ""
    location: Optional[str] = None
    deadline: Optional[datetime] = None
    audition_date: Optional[datetime] = None
    creator_id: str
    status: str
    category: Optional[str] = None
    experience_level: Optional[str] = None
    gender: Optional[str] = None
    age_range: Optional[str] = None
    compensation: Optional[str] = None
    requirements: Optional[str] = None
    project_details: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    payment_required: bool = False
    payment_amount: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    poster_profile: Optional[PosterProfile] = None


class AuditionFilters(BaseModel):
    status: str = "open"
    search: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    experience_level: Optional[str] = None


class ApplicationCreate(BaseModel):
    notes: Optional[str] = Field(default=None, max_length=2000)


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    organizer_notes: Optional[str] = None

    class Config:
        use_enum_values = True


class ApplicantSummary(BaseModel):
    id: str
    full_name: str
    email: Optional[str] = None
    profile_picture_url: Optional[str] = None


class ApplicationRead(BaseModel):
    id: str
    audition_id: str
    artist_id: str
    status: str
    notes: Optional[str] = None
    organizer_notes: Optional[str] = None
    application_date: datetime
    artist: Optional[ApplicantSummary] = None

    class Config:
        from_attributes = True
