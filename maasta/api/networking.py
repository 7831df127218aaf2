import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from maasta.api.deps import get_deck_store, get_swipe_service
from maasta.core.config import settings
from maasta.core.security import get_current_user_id
from maasta.crud.connection import (
    count_connections,
    get_connected_profiles,
    get_discovery_candidates,
    get_incoming_requests,
)
from maasta.db.database import get_db
from maasta.schemas.artist import ArtistSummary
from maasta.schemas.connection import ConnectedArtist, ConnectionCounts, IncomingRequest, SwipeResult
from maasta.utils.artist_mappers import map_artist_summary, profile_to_row, summary_from_profile
from maasta.utils.swipe import SwipeDeck, SwipeDeckStore, SwipeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/networking", tags=["Networking"])


@router.get("/candidates", response_model=List[ArtistSummary])
async def get_candidates(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    decks: SwipeDeckStore = Depends(get_deck_store),
):
    """Start a fresh swipe deck with everyone the caller has not swiped on yet"""
    profiles = await get_discovery_candidates(db, user_id, limit or settings.SWIPE_DECK_SIZE)
    candidates = [summary_from_profile(p) for p in profiles]
    decks.put(SwipeDeck(user_id, candidates))
    return candidates


@router.post("/swipe/{target_id}/accept", response_model=SwipeResult)
async def accept_candidate(
    target_id: str,
    user_id: str = Depends(get_current_user_id),
    swipes: SwipeService = Depends(get_swipe_service),
    decks: SwipeDeckStore = Depends(get_deck_store),
):
    return await swipes.accept(user_id, target_id, deck=decks.get(user_id))


@router.post("/swipe/{target_id}/reject", response_model=SwipeResult, status_code=status.HTTP_202_ACCEPTED)
async def reject_candidate(
    target_id: str,
    user_id: str = Depends(get_current_user_id),
    swipes: SwipeService = Depends(get_swipe_service),
    decks: SwipeDeckStore = Depends(get_deck_store),
):
    return swipes.reject(user_id, target_id, deck=decks.get(user_id))


@router.get("/connections", response_model=List[ConnectedArtist])
async def my_connections(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    connected = await get_connected_profiles(db, user_id)
    return [ConnectedArtist(connected_user=summary_from_profile(p), connected_at=when) for p, when in connected]


@router.get("/requests", response_model=List[IncomingRequest])
async def incoming_requests(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    rows = await get_incoming_requests(db, user_id)
    return [
        IncomingRequest(
            connection_id=connection.id,
            requester=map_artist_summary(profile_to_row(profile)),
            created_at=connection.created_at,
        )
        for connection, profile in rows
    ]


@router.get("/counts", response_model=ConnectionCounts)
async def connection_counts(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return await count_connections(db, user_id)
