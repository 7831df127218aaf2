from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, validator

from maasta.schemas.enums import (
    DEFAULT_EXPERIENCE_LEVEL,
    DEFAULT_PROFILE_STATUS,
    DEFAULT_WORK_PREFERENCE,
)


class CustomLink(BaseModel):
    title: str
    url: str


class SkillView(BaseModel):
    id: str
    skill_name: str
    artist_id: str


class LanguageView(BaseModel):
    id: str
    language: str
    proficiency: str
    artist_id: str


class ToolView(BaseModel):
    id: str
    tool_name: str
    artist_id: str


class ProjectView(BaseModel):
    id: str
    artist_id: str
    project_name: str
    role_in_project: str
    project_type: str
    year_of_release: Optional[int] = None
    director_producer: Optional[str] = None
    streaming_platform: Optional[str] = None
    link: Optional[str] = None


class EducationView(BaseModel):
    id: str
    artist_id: str
    qualification_name: str
    institution: Optional[str] = None
    year_completed: Optional[int] = None
    is_academic: Optional[bool] = None


class MediaAssetView(BaseModel):
    id: str
    artist_id: str
    asset_url: str
    file_name: str
    file_type: str
    description: Optional[str] = None
    is_video: bool = False
    is_embed: bool = False
    embed_source: Optional[str] = None
    file_size: int = 0


class AwardView(BaseModel):
    id: str
    artist_id: str
    title: str
    # Same value as `title`, kept for consumers that read the older field name
    award_name: str
    organization: Optional[str] = None
    year: Optional[int] = None
    description: Optional[str] = None


class WorkLinkView(BaseModel):
    id: str
    artist_id: str
    work_title: str
    work_url: str
    display_order: int = 0


class ArtistRead(BaseModel):
    """Unified artist view model. Every relation is a list, never null."""
    id: str
    full_name: str
    email: Optional[str] = None
    bio: Optional[str] = None
    headline: Optional[str] = None
    profile_picture_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    experience_level: str = DEFAULT_EXPERIENCE_LEVEL
    verified: bool = False
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    willing_to_relocate: bool = False
    work_preference: str = DEFAULT_WORK_PREFERENCE
    years_of_experience: int = 0
    association_membership: Optional[str] = None
    personal_website: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None
    youtube_vimeo: Optional[str] = None
    role: str = "artist"
    status: str = DEFAULT_PROFILE_STATUS
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    custom_links: List[CustomLink] = Field(default_factory=list)

    skills: List[str] = Field(default_factory=list)
    special_skills: List[SkillView] = Field(default_factory=list)
    language_skills: List[LanguageView] = Field(default_factory=list)
    tools_software: List[ToolView] = Field(default_factory=list)
    projects: List[ProjectView] = Field(default_factory=list)
    education_training: List[EducationView] = Field(default_factory=list)
    media_assets: List[MediaAssetView] = Field(default_factory=list)
    awards: List[AwardView] = Field(default_factory=list)
    work_links: List[WorkLinkView] = Field(default_factory=list)


class ArtistSummary(BaseModel):
    """Card-sized artist used by listings, featured artists and the swipe deck."""
    id: str
    full_name: str
    bio: Optional[str] = None
    profile_picture_url: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    experience_level: str = DEFAULT_EXPERIENCE_LEVEL
    verified: bool = False
    skills: List[str] = Field(default_factory=list)


class ArtistFilters(BaseModel):
    search: Optional[str] = None
    category: Optional[str] = None
    city: Optional[str] = None
    experience_level: Optional[str] = None

    @validator("search", "category", "city", "experience_level")
    def blank_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class ProfileStrengthSection(BaseModel):
    name: str
    weight: int
    completed: bool
    description: str


class ProfileStrength(BaseModel):
    total_strength: int
    status: str
    sections: List[ProfileStrengthSection]
    incomplete_sections: List[str]
