"""
Endpoints for the signed-in artist's own profile
- Profile editing
- Profile sections (skills, languages, tools, projects, education, media, awards, work links)
- Profile strength
"""

import logging
from typing import Any, Dict, List
from fastapi import APIRouter, Body, Depends, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from maasta.api.deps import get_cache_manager
from maasta.core.security import get_current_user, get_current_user_id
from maasta.crud.profile import fetch_artist_by_id, update_profile
from maasta.crud.profile_sections import (
    SECTIONS,
    add_section_item,
    delete_section_item,
    get_section,
    list_section_items,
)
from maasta.db.database import get_db, get_session_factory
from maasta.models.profile import Profile
from maasta.schemas.artist import ArtistRead, ProfileStrength
from maasta.schemas.profile import ProfileUpdate
from maasta.utils.cache import CacheVersionManager
from maasta.utils.profile_strength import calculate_profile_strength

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("/me", response_model=ArtistRead)
async def get_own_profile(
    user_id: str = Depends(get_current_user_id),
    session_factory=Depends(get_session_factory),
    cache: CacheVersionManager = Depends(get_cache_manager),
):
    return await fetch_artist_by_id(session_factory, user_id, cache)


@router.put("/me", response_model=ArtistRead)
async def update_own_profile(
    payload: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
    session_factory=Depends(get_session_factory),
    cache: CacheVersionManager = Depends(get_cache_manager),
):
    profile = await update_profile(db, current_user, payload, cache)
    return await fetch_artist_by_id(session_factory, profile.id, cache)


@router.get("/me/strength", response_model=ProfileStrength)
async def get_profile_strength(
    user_id: str = Depends(get_current_user_id),
    session_factory=Depends(get_session_factory),
    cache: CacheVersionManager = Depends(get_cache_manager),
):
    artist = await fetch_artist_by_id(session_factory, user_id, cache)
    return calculate_profile_strength(artist)


@router.get("/{artist_id}/sections/{section}")
async def list_profile_section(
    artist_id: str,
    section: str,
    db: AsyncSession = Depends(get_db),
) -> List[Dict[str, Any]]:
    items = await list_section_items(db, artist_id, section)
    return [item.dict() for item in items]


@router.post("/me/sections/{section}", status_code=status.HTTP_201_CREATED)
async def add_profile_section_item(
    section: str,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    cache: CacheVersionManager = Depends(get_cache_manager),
) -> Dict[str, Any]:
    # The body schema depends on the section, so it is validated here rather than by FastAPI
    try:
        data = get_section(section).schema(**payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    item = await add_section_item(db, user_id, section, data, cache)
    return item.dict()


@router.delete("/me/sections/{section}/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile_section_item(
    section: str,
    item_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    cache: CacheVersionManager = Depends(get_cache_manager),
):
    await delete_section_item(db, user_id, section, item_id, cache)


@router.get("/sections", response_model=List[str])
async def available_sections():
    return list(SECTIONS)
