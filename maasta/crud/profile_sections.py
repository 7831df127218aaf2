"""
Create/list/delete for the per-artist profile sections (skills, languages,
tools, projects, education, media, awards and work links).
"""

import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Type

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from maasta.core.error_codes import NOT_AUTHORIZED
from maasta.core.exceptions import CustomHTTPException
from maasta.models.profile import (
    Award,
    EducationTraining,
    LanguageSkill,
    MediaAsset,
    Project,
    SpecialSkill,
    ToolSoftware,
    WorkLink,
)
from maasta.schemas.profile import (
    AwardCreate,
    EducationCreate,
    LanguageCreate,
    MediaAssetCreate,
    ProjectCreate,
    SkillCreate,
    ToolCreate,
    WorkLinkCreate,
)
from maasta.utils import artist_mappers
from maasta.utils.cache import CacheVersionManager
from maasta.utils.validators import ensure_uuid

logger = logging.getLogger(__name__)


class Section(NamedTuple):
    model: Type[SQLModel]
    schema: Type[BaseModel]
    mapper: Callable[[Dict[str, Any], str], BaseModel]
    order_by: Optional[str] = None
    ascending: bool = False


SECTIONS: Dict[str, Section] = {
    "skills": Section(SpecialSkill, SkillCreate, artist_mappers.map_skill),
    "languages": Section(LanguageSkill, LanguageCreate, artist_mappers.map_language),
    "tools": Section(ToolSoftware, ToolCreate, artist_mappers.map_tool),
    "projects": Section(Project, ProjectCreate, artist_mappers.map_project, "created_at"),
    "education": Section(EducationTraining, EducationCreate, artist_mappers.map_education, "created_at"),
    "media": Section(MediaAsset, MediaAssetCreate, artist_mappers.map_media_asset, "created_at"),
    "awards": Section(Award, AwardCreate, artist_mappers.map_award, "created_at"),
    "work_links": Section(WorkLink, WorkLinkCreate, artist_mappers.map_work_link, "display_order", ascending=True),
}


def get_section(name: str) -> Section:
    section = SECTIONS.get(name)
    if section is None:
        raise CustomHTTPException(404, f"Unknown profile section: {name}")
    return section


def to_view(section: Section, item: SQLModel) -> BaseModel:
    return section.mapper(item.model_dump(), str(item.artist_id))


def _invalidate(cache: Optional[CacheVersionManager], artist_id: str):
    if cache is not None:
        cache.invalidate(f"artist:{artist_id}")


async def list_section_items(db: AsyncSession, artist_id: str, name: str) -> List[BaseModel]:
    section = get_section(name)
    artist_id = ensure_uuid(artist_id, "artist")
    stmt = select(section.model).where(section.model.artist_id == artist_id)
    if section.order_by:
        column = getattr(section.model, section.order_by)
        stmt = stmt.order_by(column if section.ascending else column.desc())
    result = await db.execute(stmt)
    return [to_view(section, item) for item in result.scalars().all()]


async def add_section_item(
    db: AsyncSession,
    artist_id: str,
    name: str,
    data: BaseModel,
    cache: Optional[CacheVersionManager] = None,
) -> BaseModel:
    section = get_section(name)
    if not isinstance(data, section.schema):
        data = section.schema(**data.dict())
    item = section.model(artist_id=artist_id, **data.dict())
    try:
        db.add(item)
        await db.commit()
        await db.refresh(item)
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Database error adding {name} for {artist_id}", exc_info=True)
        raise CustomHTTPException(500, f"Failed to add {name} entry")
    _invalidate(cache, artist_id)
    return to_view(section, item)


async def delete_section_item(
    db: AsyncSession,
    artist_id: str,
    name: str,
    item_id,
    cache: Optional[CacheVersionManager] = None,
) -> bool:
    section = get_section(name)
    item_id = ensure_uuid(item_id, name)
    item = await db.get(section.model, item_id)
    if not item:
        raise CustomHTTPException(404, f"{name.capitalize()} entry not found")
    if str(item.artist_id) != str(artist_id):
        raise CustomHTTPException(403, f"You can only delete your own {name} entries", error_code=NOT_AUTHORIZED)
    try:
        await db.delete(item)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Database error deleting {name} {item_id}", exc_info=True)
        raise CustomHTTPException(500, f"Failed to delete {name} entry")
    _invalidate(cache, artist_id)
    return True
