from datetime import datetime
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship, Column, JSON

from maasta.models.profile import Profile, generate_uuid
from maasta.schemas.enums import ApplicationStatus, AuditionStatus


class Audition(SQLModel, table=True):
    __tablename__ = "auditions"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    title: str = Field(..., max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    deadline: Optional[datetime] = None
    audition_date: Optional[datetime] = None
    creator_id: str = Field(foreign_key="profiles.id", index=True)
    status: str = Field(default=AuditionStatus.OPEN.value, index=True)
    category: Optional[str] = None
    experience_level: Optional[str] = None
    gender: Optional[str] = None
    age_range: Optional[str] = None
    compensation: Optional[str] = None
    requirements: Optional[str] = None
    project_details: Optional[str] = None
    tags: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    payment_required: bool = False
    payment_amount: Optional[float] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    creator: Optional[Profile] = Relationship()
    applications: List["AuditionApplication"] = Relationship(back_populates="audition")


class AuditionApplication(SQLModel, table=True):
    __tablename__ = "audition_applications"
    __table_args__ = (UniqueConstraint("audition_id", "artist_id", name="uq_audition_application_artist"),)

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    audition_id: str = Field(foreign_key="auditions.id", index=True)
    artist_id: str = Field(foreign_key="profiles.id", index=True)
    status: str = Field(default=ApplicationStatus.PENDING.value)
    notes: Optional[str] = None
    organizer_notes: Optional[str] = None
    application_date: datetime = Field(default_factory=datetime.utcnow)

    audition: Optional[Audition] = Relationship(back_populates="applications")
    artist: Optional[Profile] = Relationship()
