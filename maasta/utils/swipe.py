"""
Swipe networking: the accept/reject protocol and the per-user candidate deck.

Accept runs three time-boxed steps (insert, reciprocal check, upgrade), each
in its own session. A timed-out step downgrades the outcome instead of
aborting the flow: a slow insert keeps running while the reciprocal check
proceeds, and the upgrade joins it before flipping the pair. The deck is
advanced before any step runs and is never moved back. Reject is a detached
background insert with no delivery guarantee.

Decks live in a bounded store; the least recently used deck is dropped once
the store is full and rebuilt on the owner's next request.
"""

import asyncio
from collections import OrderedDict
import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Set, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from maasta.core.config import settings
from maasta.core.error_codes import SELF_SWIPE
from maasta.core.exceptions import CustomHTTPException
from maasta.crud.connection import (
    find_reciprocal_pending,
    insert_connection,
    upgrade_pair_to_connected,
)
from maasta.crud.notification import notify_connection_event, notify_in_background
from maasta.schemas.artist import ArtistSummary
from maasta.schemas.connection import SwipeResult
from maasta.schemas.enums import ConnectionStatus, SwipeOutcome
from maasta.utils.background import BackgroundTaskRunner
from maasta.utils.fetch_fallback import await_with_deadline, run_with_deadline
from maasta.utils.validators import ensure_uuid

logger = logging.getLogger(__name__)

T = TypeVar("T")

OUTCOME_MESSAGES = {
    SwipeOutcome.MATCHED: "It's a match! You can now chat with this person.",
    SwipeOutcome.REQUEST_SENT: "Connection request sent!",
    SwipeOutcome.SLOW_CONNECTION: "Connection request sent. Your connection seems slow.",
    SwipeOutcome.FAILED: "Failed to send connection request",
    SwipeOutcome.REJECTED: "Profile skipped",
}


class SwipeDeck:
    """Ordered candidates for one user plus the ids already swiped on"""

    def __init__(self, owner_id: str, candidates: Iterable[ArtistSummary]):
        self.owner_id = owner_id
        self.candidates: List[ArtistSummary] = list(candidates)
        self.current_index = 0
        self.swiped: Set[str] = set()

    @property
    def has_more(self) -> bool:
        return self.current_index < len(self.candidates)

    @property
    def current(self) -> Optional[ArtistSummary]:
        return self.candidates[self.current_index] if self.has_more else None

    def advance(self, target_id: str) -> Optional[ArtistSummary]:
        self.swiped.add(target_id)
        while self.has_more and self.candidates[self.current_index].id in self.swiped:
            self.current_index += 1
        return self.current


class SwipeDeckStore:
    def __init__(self, max_decks: int = None):
        self.max_decks = max_decks or settings.SWIPE_MAX_DECKS
        self._decks: "OrderedDict[str, SwipeDeck]" = OrderedDict()

    def get(self, owner_id: str) -> Optional[SwipeDeck]:
        deck = self._decks.get(owner_id)
        if deck is not None:
            self._decks.move_to_end(owner_id)
        return deck

    def put(self, deck: SwipeDeck) -> SwipeDeck:
        self._decks[deck.owner_id] = deck
        self._decks.move_to_end(deck.owner_id)
        while len(self._decks) > self.max_decks:
            evicted, _ = self._decks.popitem(last=False)
            logger.debug(f"Evicted swipe deck for {evicted}")
        return deck

    def __len__(self) -> int:
        return len(self._decks)


class SwipeService:
    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        background: BackgroundTaskRunner,
        insert_timeout: float = None,
        check_timeout: float = None,
        upgrade_timeout: float = None,
    ):
        self._session_factory = session_factory
        self._background = background
        self.insert_timeout = insert_timeout or settings.MATCH_INSERT_TIMEOUT
        self.check_timeout = check_timeout or settings.MATCH_CHECK_TIMEOUT
        self.upgrade_timeout = upgrade_timeout or settings.MATCH_UPGRADE_TIMEOUT

    @staticmethod
    def _validate_pair(actor_id, target_id):
        actor_id = ensure_uuid(actor_id, "user")
        target_id = ensure_uuid(target_id, "profile")
        if actor_id == target_id:
            raise CustomHTTPException(422, "You cannot connect with yourself", error_code=SELF_SWIPE)
        return actor_id, target_id

    def _in_session(self, operation: Callable[[AsyncSession], Awaitable[T]]) -> Awaitable[T]:
        async def run():
            async with self._session_factory() as db:
                return await operation(db)
        return run()

    async def _step(self, operation: Callable[[AsyncSession], Awaitable[T]], timeout: float, label: str) -> T:
        return await run_with_deadline(lambda: self._in_session(operation), timeout, label)

    def _notify(self, recipient_id: str, actor_id: str, matched: bool):
        notify_in_background(
            self._background, self._session_factory, notify_connection_event,
            recipient_id, actor_id, matched=matched,
        )

    async def accept(self, actor_id, target_id, deck: Optional[SwipeDeck] = None) -> SwipeResult:
        actor_id, target_id = self._validate_pair(actor_id, target_id)
        next_candidate = deck.advance(target_id) if deck is not None else None

        def result(outcome: SwipeOutcome) -> SwipeResult:
            return SwipeResult(
                outcome=outcome,
                message=OUTCOME_MESSAGES[outcome],
                target_user_id=target_id,
                next_candidate=next_candidate,
            )

        pair = f"{actor_id} -> {target_id}"

        # Kept as a task so a slow insert can still be joined by the upgrade step
        insert_task = asyncio.ensure_future(self._in_session(
            lambda db: insert_connection(db, actor_id, target_id, ConnectionStatus.PENDING.value)
        ))
        slow = False
        try:
            await await_with_deadline(insert_task, self.insert_timeout, f"connection insert {pair}")
        except asyncio.TimeoutError:
            slow = True
        except Exception:
            logger.exception(f"Connection insert failed for {pair}")
            return result(SwipeOutcome.FAILED)

        try:
            reciprocal = await self._step(
                lambda db: find_reciprocal_pending(db, actor_id, target_id),
                self.check_timeout,
                f"reciprocal check {pair}",
            )
        except asyncio.TimeoutError:
            logger.warning(f"Reciprocal check timed out for {pair}, treating as no match")
            reciprocal = None
        except Exception:
            logger.exception(f"Reciprocal check failed for {pair}")
            return result(SwipeOutcome.FAILED)

        if reciprocal is None:
            if slow:
                return result(SwipeOutcome.SLOW_CONNECTION)
            self._notify(target_id, actor_id, matched=False)
            return result(SwipeOutcome.REQUEST_SENT)

        async def upgrade(db: AsyncSession) -> int:
            # Both directed rows must exist before the pair flips in one statement
            await insert_task
            return await upgrade_pair_to_connected(db, actor_id, target_id)

        try:
            updated = await self._step(upgrade, self.upgrade_timeout, f"match upgrade {pair}")
        except asyncio.TimeoutError:
            return result(SwipeOutcome.SLOW_CONNECTION)
        except Exception:
            logger.exception(f"Match upgrade failed for {pair}")
            return result(SwipeOutcome.FAILED)

        if not updated:
            logger.info(f"Pair {pair} was already upgraded by the other side")
        self._notify(target_id, actor_id, matched=True)
        return result(SwipeOutcome.MATCHED)

    def reject(self, actor_id, target_id, deck: Optional[SwipeDeck] = None) -> SwipeResult:
        """
        Record a left swipe in the background. The returned result does not
        wait for the insert; a failure only shows up in the log.
        """
        actor_id, target_id = self._validate_pair(actor_id, target_id)
        next_candidate = deck.advance(target_id) if deck is not None else None

        async def record():
            async with self._session_factory() as db:
                await insert_connection(db, actor_id, target_id, ConnectionStatus.REJECTED.value)

        self._background.spawn(record, f"reject {actor_id} -> {target_id}")
        return SwipeResult(
            outcome=SwipeOutcome.REJECTED,
            message=OUTCOME_MESSAGES[SwipeOutcome.REJECTED],
            target_user_id=target_id,
            next_candidate=next_candidate,
        )
