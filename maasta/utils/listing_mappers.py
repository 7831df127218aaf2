"""
Row mappers for audition and event listings.

Primary listing queries join the poster/organiser profile; fallback queries
read the bare table. Each has its own mapper so the caller never has to guess
whether the join came through.
"""

from typing import Any, Dict, Optional

from maasta.schemas.audition import AuditionRead, PosterProfile
from maasta.schemas.event import EventRead, OrganizerProfile

DEFAULT_ORGANIZER_NAME = "Event Organizer"


def _poster_profile(profile: Optional[Dict[str, Any]]) -> Optional[PosterProfile]:
    if not profile or not profile.get("id"):
        return None
    return PosterProfile(
        id=str(profile["id"]),
        full_name=profile.get("full_name") or "Unknown Artist",
        profile_picture=profile.get("profile_picture_url"),
    )


def _audition_fields(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(row["id"]),
        "title": row.get("title") or "",
        "description": row.get("description") or "",
        "location": row.get("location"),
        "deadline": row.get("deadline"),
        "audition_date": row.get("audition_date"),
        "creator_id": str(row.get("creator_id") or ""),
        "status": row.get("status") or "open",
        "category": row.get("category"),
        "experience_level": row.get("experience_level"),
        "gender": row.get("gender"),
        "age_range": row.get("age_range"),
        "compensation": row.get("compensation"),
        "requirements": row.get("requirements"),
        "project_details": row.get("project_details"),
        "tags": list(row.get("tags") or []),
        "payment_required": bool(row.get("payment_required")),
        "payment_amount": row.get("payment_amount"),
        "created_at": row.get("created_at"),
        "updated_at": row.get("updated_at"),
    }


def map_audition_row(row: Dict[str, Any]) -> AuditionRead:
    return AuditionRead(**_audition_fields(row), poster_profile=_poster_profile(row.get("creator")))


def map_fallback_audition(row: Dict[str, Any]) -> AuditionRead:
    return AuditionRead(**_audition_fields(row), poster_profile=None)


def _event_fields(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(row["id"]),
        "title": row.get("title") or "",
        "description": row.get("description") or "",
        "location": row.get("location") or "",
        "event_date": row["event_date"],
        "date_start": row.get("date_start"),
        "date_end": row.get("date_end"),
        "category": row.get("category"),
        "status": row.get("status") or "published",
        "creator_id": row.get("creator_id"),
        "is_online": bool(row.get("is_online")),
        "ticket_type": row.get("ticket_type"),
        "ticket_price": row.get("ticket_price"),
        "max_attendees": row.get("max_attendees"),
        "registration_deadline": row.get("registration_deadline"),
        "banner_url": row.get("banner_url"),
        "created_at": row.get("created_at"),
    }


def map_event_row(row: Dict[str, Any]) -> EventRead:
    creator = row.get("creator") or {}
    name = creator.get("full_name") or DEFAULT_ORGANIZER_NAME
    return EventRead(**_event_fields(row), creator_profile=OrganizerProfile(full_name=name))


def map_fallback_event(row: Dict[str, Any]) -> EventRead:
    return EventRead(**_event_fields(row), creator_profile=OrganizerProfile(full_name=DEFAULT_ORGANIZER_NAME))


def with_creator(item, include_creator: bool = False) -> Dict[str, Any]:
    """Flatten an Audition/Event ORM object; the creator is only read when eager-loaded."""
    row = item.model_dump()
    if include_creator:
        creator = item.creator
        row["creator"] = creator.model_dump() if creator is not None else None
    return row
