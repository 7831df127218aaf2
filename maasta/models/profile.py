from datetime import date, datetime
from typing import List, Optional, TYPE_CHECKING, Any, Dict
from uuid import uuid4

from sqlmodel import SQLModel, Field, Relationship, Column, JSON

if TYPE_CHECKING:
    from maasta.models.connection import Connection


def generate_uuid() -> str:
    return str(uuid4())


class ProfileBase(SQLModel):
    """Fields an artist can edit on their own profile"""
    full_name: str = Field(..., min_length=1, max_length=120)
    bio: Optional[str] = Field(default=None, max_length=2000)
    headline: Optional[str] = Field(default=None, max_length=200)
    profile_picture_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    experience_level: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    willing_to_relocate: Optional[bool] = False
    work_preference: Optional[str] = None
    years_of_experience: Optional[int] = None
    association_membership: Optional[str] = None
    personal_website: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None
    youtube_vimeo: Optional[str] = None


class Profile(ProfileBase, table=True):
    """An artist, organiser or casting agent. Mirrors the hosted `profiles` table."""
    __tablename__ = "profiles"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    email: str = Field(..., index=True)
    verified: Optional[bool] = False
    role: Optional[str] = Field(default="artist")
    status: Optional[str] = Field(default="active", index=True)
    custom_links: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        sa_column=Column(JSON),
        description="Portfolio links as {title, url} objects"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    special_skills: List["SpecialSkill"] = Relationship(back_populates="artist")
    language_skills: List["LanguageSkill"] = Relationship(back_populates="artist")
    tools_software: List["ToolSoftware"] = Relationship(back_populates="artist")
    projects: List["Project"] = Relationship(back_populates="artist")
    education_training: List["EducationTraining"] = Relationship(back_populates="artist")
    media_assets: List["MediaAsset"] = Relationship(back_populates="artist")
    awards: List["Award"] = Relationship(back_populates="artist")
    work_links: List["WorkLink"] = Relationship(back_populates="artist")


class SpecialSkill(SQLModel, table=True):
    __tablename__ = "special_skills"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(foreign_key="profiles.id", index=True)
    skill: str = Field(..., max_length=100)

    artist: Optional[Profile] = Relationship(back_populates="special_skills")


class LanguageSkill(SQLModel, table=True):
    __tablename__ = "language_skills"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(foreign_key="profiles.id", index=True)
    language: str = Field(..., max_length=60)
    proficiency: str = Field(default="basic")

    artist: Optional[Profile] = Relationship(back_populates="language_skills")


class ToolSoftware(SQLModel, table=True):
    __tablename__ = "tools_software"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(foreign_key="profiles.id", index=True)
    tool_name: str = Field(..., max_length=100)

    artist: Optional[Profile] = Relationship(back_populates="tools_software")


class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(foreign_key="profiles.id", index=True)
    project_name: str
    role_in_project: str
    project_type: str = Field(default="other")
    year_of_release: Optional[int] = None
    director_producer: Optional[str] = None
    streaming_platform: Optional[str] = None
    link: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    artist: Optional[Profile] = Relationship(back_populates="projects")


class EducationTraining(SQLModel, table=True):
    __tablename__ = "education_training"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(foreign_key="profiles.id", index=True)
    qualification_name: str
    institution: Optional[str] = None
    year_completed: Optional[int] = None
    is_academic: Optional[bool] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    artist: Optional[Profile] = Relationship(back_populates="education_training")


class MediaAsset(SQLModel, table=True):
    __tablename__ = "media_assets"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(foreign_key="profiles.id", index=True)
    url: str
    file_name: str
    file_type: str
    description: Optional[str] = None
    is_video: Optional[bool] = False
    is_embed: Optional[bool] = False
    embed_source: Optional[str] = None
    file_size: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)

    artist: Optional[Profile] = Relationship(back_populates="media_assets")


class Award(SQLModel, table=True):
    __tablename__ = "awards"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(foreign_key="profiles.id", index=True)
    title: str
    organization: Optional[str] = None
    year: Optional[int] = None
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    artist: Optional[Profile] = Relationship(back_populates="awards")


class WorkLink(SQLModel, table=True):
    __tablename__ = "work_links"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    artist_id: str = Field(foreign_key="profiles.id", index=True)
    work_title: str
    work_url: str
    display_order: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    artist: Optional[Profile] = Relationship(back_populates="work_links")
