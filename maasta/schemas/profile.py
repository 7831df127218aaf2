from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field, HttpUrl, validator

from maasta.schemas.artist import CustomLink
from maasta.schemas.enums import (
    ArtistCategory,
    ExperienceLevel,
    LanguageProficiency,
    ProjectType,
    WorkPreference,
)


class ProfileUpdate(BaseModel):
    """Partial profile edit. Only the fields sent are written."""
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    bio: Optional[str] = Field(default=None, max_length=2000)
    headline: Optional[str] = Field(default=None, max_length=200)
    profile_picture_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    category: Optional[ArtistCategory] = None
    experience_level: Optional[ExperienceLevel] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    willing_to_relocate: Optional[bool] = None
    work_preference: Optional[WorkPreference] = None
    years_of_experience: Optional[int] = Field(default=None, ge=0, le=100)
    association_membership: Optional[str] = None
    personal_website: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None
    youtube_vimeo: Optional[str] = None
    custom_links: Optional[List[CustomLink]] = None

    @validator("personal_website", "profile_picture_url", "cover_image_url", pre=True)
    def convert_httpurl_to_str(cls, v):
        if isinstance(v, HttpUrl):
            return str(v)
        return v

    class Config:
        use_enum_values = True


class SkillCreate(BaseModel):
    skill: str = Field(..., min_length=1, max_length=100)

    @validator("skill")
    def strip_skill(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Skill cannot be blank")
        return v


class LanguageCreate(BaseModel):
    language: str = Field(..., min_length=1, max_length=60)
    proficiency: LanguageProficiency = LanguageProficiency.BASIC

    class Config:
        use_enum_values = True


class ToolCreate(BaseModel):
    tool_name: str = Field(..., min_length=1, max_length=100)


class ProjectCreate(BaseModel):
    project_name: str = Field(..., min_length=1)
    role_in_project: str = Field(..., min_length=1)
    project_type: ProjectType = ProjectType.OTHER
    year_of_release: Optional[int] = Field(default=None, ge=1900, le=2100)
    director_producer: Optional[str] = None
    streaming_platform: Optional[str] = None
    link: Optional[str] = None

    class Config:
        use_enum_values = True


class EducationCreate(BaseModel):
    qualification_name: str = Field(..., min_length=1)
    institution: Optional[str] = None
    year_completed: Optional[int] = Field(default=None, ge=1900, le=2100)
    is_academic: Optional[bool] = None


class MediaAssetCreate(BaseModel):
    url: str = Field(..., min_length=1)
    file_name: str = Field(..., min_length=1)
    file_type: str = Field(..., min_length=1)
    description: Optional[str] = None
    is_video: bool = False
    is_embed: bool = False
    embed_source: Optional[str] = None
    file_size: int = Field(default=0, ge=0)


class AwardCreate(BaseModel):
    title: str = Field(..., min_length=1)
    organization: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    description: Optional[str] = None


class WorkLinkCreate(BaseModel):
    work_title: str = Field(..., min_length=1, max_length=200)
    work_url: str = Field(..., min_length=1)
    display_order: int = Field(default=0, ge=0)

    @validator("work_url")
    def require_http_scheme(cls, v):
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("Work link must be an http(s) URL")
        return v
