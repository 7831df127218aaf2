"""
Map raw profile rows into the ArtistRead / ArtistSummary view models.

Rows are plain dicts whose shape depends on the query that produced them:
the joined primary query nests relation lists, the fallback query carries
the bare profile columns only. Whatever comes in, the output always has every
relation as a list and every enum-like field filled.

Ids synthesized here for rows that lack one are random on every call. They
identify an item inside one response and must not be stored.
"""

import json
import logging
from typing import Any, Dict, Iterable, List
from uuid import uuid4

from maasta.schemas.artist import (
    ArtistRead,
    ArtistSummary,
    AwardView,
    CustomLink,
    EducationView,
    LanguageView,
    MediaAssetView,
    ProjectView,
    SkillView,
    ToolView,
    WorkLinkView,
)
from maasta.schemas.enums import (
    DEFAULT_EXPERIENCE_LEVEL,
    DEFAULT_PROFILE_STATUS,
    DEFAULT_WORK_PREFERENCE,
    LanguageProficiency,
    ProjectType,
)

logger = logging.getLogger(__name__)

RELATION_FIELDS = (
    "special_skills",
    "language_skills",
    "tools_software",
    "projects",
    "education_training",
    "media_assets",
    "awards",
    "work_links",
)


def _synth_id(value: Any) -> str:
    return str(value) if value else str(uuid4())


def _as_list(value: Any) -> List[Dict[str, Any]]:
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, dict)]
    return []


def _parse_custom_links(value: Any) -> List[CustomLink]:
    if not value:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            logger.error("Error parsing custom_links, ignoring them")
            return []
    links = []
    for item in _as_list(value):
        if item.get("title") and item.get("url"):
            links.append(CustomLink(title=str(item["title"]), url=str(item["url"])))
    return links


def _scalar_fields(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(row["id"]),
        "full_name": row.get("full_name") or "Unknown Artist",
        "email": row.get("email"),
        "bio": row.get("bio") or None,
        "headline": row.get("headline") or None,
        "profile_picture_url": row.get("profile_picture_url") or None,
        "cover_image_url": row.get("cover_image_url") or None,
        "city": row.get("city") or None,
        "state": row.get("state") or None,
        "country": row.get("country") or None,
        "category": row.get("category") or None,
        "experience_level": row.get("experience_level") or DEFAULT_EXPERIENCE_LEVEL,
        "verified": bool(row.get("verified")),
        "phone_number": row.get("phone_number") or None,
        "date_of_birth": row.get("date_of_birth") or None,
        "gender": row.get("gender") or None,
        "willing_to_relocate": bool(row.get("willing_to_relocate")),
        "work_preference": row.get("work_preference") or DEFAULT_WORK_PREFERENCE,
        "years_of_experience": row.get("years_of_experience") or 0,
        "association_membership": row.get("association_membership") or None,
        "personal_website": row.get("personal_website") or None,
        "instagram": row.get("instagram") or None,
        "linkedin": row.get("linkedin") or None,
        "youtube_vimeo": row.get("youtube_vimeo") or None,
        "role": row.get("role") or "artist",
        "status": row.get("status") or DEFAULT_PROFILE_STATUS,
        "created_at": row.get("created_at"),
        "updated_at": row.get("updated_at"),
        "custom_links": _parse_custom_links(row.get("custom_links")),
    }


def map_skill(raw: Dict[str, Any], artist_id: str) -> SkillView:
    return SkillView(id=_synth_id(raw.get("id")), skill_name=raw.get("skill") or "", artist_id=artist_id)


def map_language(raw: Dict[str, Any], artist_id: str) -> LanguageView:
    return LanguageView(
        id=_synth_id(raw.get("id")),
        language=raw.get("language") or "",
        proficiency=raw.get("proficiency") or LanguageProficiency.BASIC.value,
        artist_id=artist_id,
    )


def map_tool(raw: Dict[str, Any], artist_id: str) -> ToolView:
    return ToolView(id=_synth_id(raw.get("id")), tool_name=raw.get("tool_name") or "", artist_id=artist_id)


def map_project(raw: Dict[str, Any], artist_id: str) -> ProjectView:
    return ProjectView(
        id=_synth_id(raw.get("id")),
        artist_id=artist_id,
        project_name=raw.get("project_name") or "",
        role_in_project=raw.get("role_in_project") or "",
        project_type=raw.get("project_type") or ProjectType.OTHER.value,
        year_of_release=raw.get("year_of_release"),
        director_producer=raw.get("director_producer"),
        streaming_platform=raw.get("streaming_platform"),
        link=raw.get("link"),
    )


def map_education(raw: Dict[str, Any], artist_id: str) -> EducationView:
    return EducationView(
        id=_synth_id(raw.get("id")),
        artist_id=artist_id,
        qualification_name=raw.get("qualification_name") or "",
        institution=raw.get("institution"),
        year_completed=raw.get("year_completed"),
        is_academic=raw.get("is_academic"),
    )


def map_media_asset(raw: Dict[str, Any], artist_id: str) -> MediaAssetView:
    return MediaAssetView(
        id=_synth_id(raw.get("id")),
        artist_id=artist_id,
        asset_url=raw.get("url") or "",
        file_name=raw.get("file_name") or "",
        file_type=raw.get("file_type") or "",
        description=raw.get("description"),
        is_video=bool(raw.get("is_video")),
        is_embed=bool(raw.get("is_embed")),
        embed_source=raw.get("embed_source"),
        file_size=raw.get("file_size") or 0,
    )


def map_award(raw: Dict[str, Any], artist_id: str) -> AwardView:
    title = raw.get("title") or ""
    return AwardView(
        id=_synth_id(raw.get("id")),
        artist_id=artist_id,
        title=title,
        award_name=title,
        organization=raw.get("organization"),
        year=raw.get("year"),
        description=raw.get("description"),
    )


def map_work_link(raw: Dict[str, Any], artist_id: str) -> WorkLinkView:
    return WorkLinkView(
        id=_synth_id(raw.get("id")),
        artist_id=artist_id,
        work_title=raw.get("work_title") or "",
        work_url=raw.get("work_url") or "",
        display_order=raw.get("display_order") or 0,
    )


def map_artist_row(row: Dict[str, Any]) -> ArtistRead:
    """Full mapper for rows coming from the joined query"""
    fields = _scalar_fields(row)
    artist_id = fields["id"]

    special_skills = [map_skill(s, artist_id) for s in _as_list(row.get("special_skills"))]

    return ArtistRead(
        **fields,
        special_skills=special_skills,
        skills=[s.skill_name for s in special_skills],
        language_skills=[map_language(l, artist_id) for l in _as_list(row.get("language_skills"))],
        tools_software=[map_tool(t, artist_id) for t in _as_list(row.get("tools_software"))],
        projects=[map_project(p, artist_id) for p in _as_list(row.get("projects"))],
        education_training=[map_education(e, artist_id) for e in _as_list(row.get("education_training"))],
        media_assets=[map_media_asset(m, artist_id) for m in _as_list(row.get("media_assets"))],
        awards=[map_award(a, artist_id) for a in _as_list(row.get("awards"))],
        work_links=sorted(
            (map_work_link(w, artist_id) for w in _as_list(row.get("work_links"))),
            key=lambda w: w.display_order,
        ),
    )


def map_fallback_artist(row: Dict[str, Any]) -> ArtistRead:
    """Degraded mapper: relations are never read, all come back empty"""
    return ArtistRead(
        **_scalar_fields(row),
        special_skills=[],
        skills=[],
        language_skills=[],
        tools_software=[],
        projects=[],
        education_training=[],
        media_assets=[],
        awards=[],
        work_links=[],
    )


def _summary_fields(row: Dict[str, Any]) -> Dict[str, Any]:
    fields = _scalar_fields(row)
    return {name: fields[name] for name in ArtistSummary.model_fields if name in fields}


def map_featured_artist(row: Dict[str, Any]) -> ArtistSummary:
    """Summary with skill names, from a query joined on special_skills"""
    skills = [s.get("skill") for s in _as_list(row.get("special_skills")) if s.get("skill")]
    return ArtistSummary(**_summary_fields(row), skills=skills)


def map_artist_summary(row: Dict[str, Any]) -> ArtistSummary:
    return ArtistSummary(**_summary_fields(row), skills=[])


def profile_to_row(profile, relations: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Flatten a Profile ORM object into the raw row shape the mappers expect.
    Only the named relations are read; they must have been eagerly loaded.
    """
    row = profile.model_dump()
    for name in relations:
        row[name] = [item.model_dump() for item in getattr(profile, name)]
    return row


def summary_from_profile(profile) -> ArtistSummary:
    """Card for a Profile loaded with its special skills"""
    return map_featured_artist(profile_to_row(profile, relations=("special_skills",)))
