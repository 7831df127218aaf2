from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from maasta.schemas.artist import ArtistSummary
from maasta.schemas.enums import SwipeOutcome


class SwipeResult(BaseModel):
    outcome: SwipeOutcome
    message: str
    target_user_id: str
    next_candidate: Optional[ArtistSummary] = None

    class Config:
        use_enum_values = True


class ConnectedArtist(BaseModel):
    """The other side of a mutual connection"""
    connected_user: ArtistSummary
    connected_at: datetime


class IncomingRequest(BaseModel):
    connection_id: str
    requester: ArtistSummary
    created_at: datetime


class ConnectionCounts(BaseModel):
    connected: int = 0
    pending_incoming: int = 0
    pending_outgoing: int = 0
