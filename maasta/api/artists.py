import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from maasta.api.deps import get_cache_manager
from maasta.crud.profile import fetch_artist_by_id, fetch_featured_artists, list_artists
from maasta.db.database import get_session_factory
from maasta.schemas.artist import ArtistFilters, ArtistRead, ArtistSummary
from maasta.schemas.enums import ArtistCategory, ExperienceLevel
from maasta.utils.cache import CacheVersionManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/artists", tags=["Artists"])


@router.get("", response_model=List[ArtistSummary])
async def browse_artists(
    search: Optional[str] = Query(None),
    category: Optional[ArtistCategory] = Query(None),
    city: Optional[str] = Query(None),
    experience_level: Optional[ExperienceLevel] = Query(None),
    exclude: Optional[str] = Query(None, description="Profile id to leave out, usually the viewer"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session_factory=Depends(get_session_factory),
):
    filters = ArtistFilters(
        search=search,
        category=category.value if category else None,
        city=city,
        experience_level=experience_level.value if experience_level else None,
    )
    return await list_artists(session_factory, filters, limit=limit, offset=offset, exclude_id=exclude)


@router.get("/featured", response_model=List[ArtistSummary])
async def featured_artists(
    limit: int = Query(4, ge=1, le=20),
    session_factory=Depends(get_session_factory),
):
    return await fetch_featured_artists(session_factory, limit=limit)


@router.get("/{artist_id}", response_model=ArtistRead)
async def get_artist(
    artist_id: str,
    session_factory=Depends(get_session_factory),
    cache: CacheVersionManager = Depends(get_cache_manager),
):
    """
    Full artist profile. Sections come back as empty lists when only the
    bare profile row could be read.
    """
    return await fetch_artist_by_id(session_factory, artist_id, cache)
