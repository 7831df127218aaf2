import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query

from maasta.api.deps import get_cache_manager
from maasta.core.security import get_current_user_id
from maasta.schemas.system import CacheVersionRead
from maasta.utils.cache import CacheVersionManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/system", tags=["System"])


@router.get("/cache-version", response_model=CacheVersionRead)
async def cache_version(
    client_version: Optional[str] = Query(None),
    cache: CacheVersionManager = Depends(get_cache_manager),
):
    """Clients compare their stored version with this one and drop local data when stale"""
    stale = cache.check_version(client_version)
    return CacheVersionRead(version=cache.version, stale=stale)


@router.post("/cache/bust", response_model=CacheVersionRead)
async def bust_cache(
    user_id: str = Depends(get_current_user_id),
    cache: CacheVersionManager = Depends(get_cache_manager),
):
    version = cache.bust()
    logger.info(f"Cache version bumped by {user_id}")
    return CacheVersionRead(version=version, stale=False)
