import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import and_, or_, select

from maasta.core.exceptions import CustomHTTPException
from maasta.models.connection import Connection
from maasta.models.profile import Profile
from maasta.schemas.connection import ConnectionCounts
from maasta.schemas.enums import ConnectionStatus, ProfileStatus

logger = logging.getLogger(__name__)


def _pair_predicate(user_a: str, user_b: str):
    return or_(
        and_(Connection.user_id == user_a, Connection.target_user_id == user_b),
        and_(Connection.user_id == user_b, Connection.target_user_id == user_a),
    )


def _swiped_by(user_id: str):
    """Ids the user already has a directed row toward, whatever its status"""
    return select(Connection.target_user_id).where(Connection.user_id == user_id).correlate(None)


async def _existing_directed(db: AsyncSession, user_id: str, target_user_id: str, status: str) -> Optional[Connection]:
    result = await db.execute(
        select(Connection)
        .where(
            Connection.user_id == user_id,
            Connection.target_user_id == target_user_id,
            Connection.status.in_([status, ConnectionStatus.CONNECTED.value]),
        )
        .limit(1)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def insert_connection(db: AsyncSession, user_id: str, target_user_id: str, status: str) -> Connection:
    """
    Record one directed swipe. A repeated swipe returns the existing row with
    the same status (or an already connected row) instead of adding a
    duplicate. Driver errors propagate to the swipe flow.
    """
    existing = await _existing_directed(db, user_id, target_user_id, status)
    if existing is not None:
        logger.debug(f"Connection {user_id} -> {target_user_id} already recorded as {existing.status}")
        return existing

    connection = Connection(user_id=user_id, target_user_id=target_user_id, status=status)
    db.add(connection)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent swipe in the same direction won the partial unique index
        await db.rollback()
        existing = await _existing_directed(db, user_id, target_user_id, status)
        if existing is None:
            raise
        return existing
    except SQLAlchemyError:
        await db.rollback()
        raise
    await db.refresh(connection)
    logger.debug(f"Inserted {status} connection {user_id} -> {target_user_id}")
    return connection


async def find_reciprocal_pending(db: AsyncSession, actor_id: str, target_id: str) -> Optional[Connection]:
    """The target's own pending row toward the actor, if any"""
    result = await db.execute(
        select(Connection)
        .where(
            Connection.user_id == target_id,
            Connection.target_user_id == actor_id,
            Connection.status == ConnectionStatus.PENDING.value,
        )
        .limit(1)
    )
    return result.scalars().first()


async def upgrade_pair_to_connected(db: AsyncSession, user_a: str, user_b: str) -> int:
    """
    Flip every pending row between the two users to connected in one
    statement. Rows in any other status are left alone, so a rejected row
    never becomes connected. Returns the number of rows changed; zero means
    the other side already completed the upgrade.
    """
    try:
        result = await db.execute(
            update(Connection)
            .where(
                _pair_predicate(user_a, user_b),
                Connection.status == ConnectionStatus.PENDING.value,
            )
            .values(status=ConnectionStatus.CONNECTED.value, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise
    logger.info(f"Connected {user_a} <-> {user_b} ({result.rowcount} rows updated)")
    return result.rowcount


async def get_pair_rows(db: AsyncSession, user_a: str, user_b: str) -> List[Connection]:
    """Both directed rows of a pair, re-read even when already in the session"""
    result = await db.execute(
        select(Connection)
        .where(_pair_predicate(user_a, user_b))
        .order_by(Connection.created_at)
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def get_discovery_candidates(db: AsyncSession, user_id: str, limit: int = 20) -> List[Profile]:
    try:
        swiped = _swiped_by(user_id)
        result = await db.execute(
            select(Profile)
            .options(selectinload(Profile.special_skills))
            .where(
                Profile.id != user_id,
                Profile.status == ProfileStatus.ACTIVE.value,
                Profile.id.not_in(swiped),
            )
            .order_by(Profile.created_at.desc())
            .limit(limit)
        )
        return result.scalars().all()
    except SQLAlchemyError:
        logger.error("Database error in get_discovery_candidates", exc_info=True)
        raise CustomHTTPException(500, "Failed to load discovery candidates")


async def get_connected_profiles(db: AsyncSession, user_id: str) -> List[Tuple[Profile, datetime]]:
    """
    Counterparts of every connected row touching the user. A mutual connection
    is stored as two rows, so each counterpart is reported once, with the
    earliest row's timestamp.
    """
    try:
        result = await db.execute(
            select(Connection)
            .where(
                or_(Connection.user_id == user_id, Connection.target_user_id == user_id),
                Connection.status == ConnectionStatus.CONNECTED.value,
            )
            .order_by(Connection.created_at)
        )
        connected_at: Dict[str, datetime] = {}
        for row in result.scalars().all():
            other = row.target_user_id if row.user_id == user_id else row.user_id
            connected_at.setdefault(other, row.updated_at or row.created_at)

        if not connected_at:
            return []

        profiles = await db.execute(
            select(Profile)
            .options(selectinload(Profile.special_skills))
            .where(Profile.id.in_(list(connected_at)))
        )
        by_id = {profile.id: profile for profile in profiles.scalars().all()}
        return [(by_id[other], when) for other, when in connected_at.items() if other in by_id]
    except SQLAlchemyError:
        logger.error("Database error in get_connected_profiles", exc_info=True)
        raise CustomHTTPException(500, "Failed to retrieve your connections")


async def get_incoming_requests(db: AsyncSession, user_id: str) -> List[Tuple[Connection, Profile]]:
    """Pending rows toward the user from people the user has not swiped on yet"""
    try:
        answered = _swiped_by(user_id)
        result = await db.execute(
            select(Connection, Profile)
            .join(Profile, Profile.id == Connection.user_id)
            .where(
                Connection.target_user_id == user_id,
                Connection.status == ConnectionStatus.PENDING.value,
                Connection.user_id.not_in(answered),
            )
            .order_by(Connection.created_at.desc())
        )
        return [(connection, profile) for connection, profile in result.all()]
    except SQLAlchemyError:
        logger.error("Database error in get_incoming_requests", exc_info=True)
        raise CustomHTTPException(500, "Failed to retrieve incoming connection requests")


async def count_connections(db: AsyncSession, user_id: str) -> ConnectionCounts:
    """Incoming requests are counted the same way get_incoming_requests lists them"""
    try:
        connected = await get_connected_profiles(db, user_id)
        incoming = await db.execute(
            select(func.count(Connection.id)).where(
                Connection.target_user_id == user_id,
                Connection.status == ConnectionStatus.PENDING.value,
                Connection.user_id.not_in(_swiped_by(user_id)),
            )
        )
        outgoing = await db.execute(
            select(func.count(Connection.id)).where(
                Connection.user_id == user_id,
                Connection.status == ConnectionStatus.PENDING.value,
            )
        )
        return ConnectionCounts(
            connected=len(connected),
            pending_incoming=incoming.scalar_one(),
            pending_outgoing=outgoing.scalar_one(),
        )
    except SQLAlchemyError:
        logger.error("Database error in count_connections", exc_info=True)
        raise CustomHTTPException(500, "Failed to count connections")
