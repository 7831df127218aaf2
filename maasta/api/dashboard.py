from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from maasta.api.deps import get_cache_manager
from maasta.core.security import get_current_user_id
from maasta.crud.dashboard import build_dashboard
from maasta.db.database import get_db, get_session_factory
from maasta.schemas.dashboard import DashboardRead
from maasta.utils.cache import CacheVersionManager

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardRead)
async def dashboard(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    session_factory=Depends(get_session_factory),
    cache: CacheVersionManager = Depends(get_cache_manager),
):
    return await build_dashboard(db, session_factory, user_id, cache)
