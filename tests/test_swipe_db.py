import pytest

from maasta.crud.connection import (
    count_connections,
    find_reciprocal_pending,
    get_connected_profiles,
    get_discovery_candidates,
    get_incoming_requests,
    get_pair_rows,
    insert_connection,
    upgrade_pair_to_connected,
)
from maasta.models.connection import Connection
from maasta.schemas.enums import SwipeOutcome


async def statuses(db_session, a, b):
    rows = await get_pair_rows(db_session, a, b)
    return sorted((row.user_id == a, row.status) for row in rows)


@pytest.mark.asyncio
async def test_first_accept_creates_one_pending_row(swipe_service, make_profile, db_session):
    ua = await make_profile()
    ub = await make_profile()

    result = await swipe_service.accept(ua.id, ub.id)

    assert result.outcome == SwipeOutcome.REQUEST_SENT
    rows = await get_pair_rows(db_session, ua.id, ub.id)
    assert [(r.user_id, r.target_user_id, r.status) for r in rows] == [(ua.id, ub.id, "pending")]


@pytest.mark.asyncio
async def test_reciprocal_accept_connects_both_rows(swipe_service, make_profile, db_session):
    ua = await make_profile()
    ub = await make_profile()
    await insert_connection(db_session, ub.id, ua.id, "pending")

    result = await swipe_service.accept(ua.id, ub.id)

    assert result.outcome == SwipeOutcome.MATCHED
    assert await statuses(db_session, ua.id, ub.id) == [(False, "connected"), (True, "connected")]


@pytest.mark.asyncio
async def test_match_symmetry_in_either_order(swipe_service, make_profile, db_session):
    ua = await make_profile()
    ub = await make_profile()

    first = await swipe_service.accept(ub.id, ua.id)
    second = await swipe_service.accept(ua.id, ub.id)

    assert first.outcome == SwipeOutcome.REQUEST_SENT
    assert second.outcome == SwipeOutcome.MATCHED
    assert await statuses(db_session, ua.id, ub.id) == [(False, "connected"), (True, "connected")]


@pytest.mark.asyncio
async def test_rejected_row_is_never_upgraded(swipe_service, background, make_profile, db_session):
    ua = await make_profile()
    ub = await make_profile()

    swipe_service.reject(ua.id, ub.id)
    await background.drain(1)
    result = await swipe_service.accept(ub.id, ua.id)

    assert result.outcome == SwipeOutcome.REQUEST_SENT
    assert await statuses(db_session, ua.id, ub.id) == [(False, "pending"), (True, "rejected")]

    # Even a direct pair upgrade leaves the rejection alone
    changed = await upgrade_pair_to_connected(db_session, ua.id, ub.id)
    assert changed == 1
    assert await statuses(db_session, ua.id, ub.id) == [(False, "connected"), (True, "rejected")]


@pytest.mark.asyncio
async def test_second_upgrade_changes_nothing(make_profile, db_session):
    ua = await make_profile()
    ub = await make_profile()
    await insert_connection(db_session, ua.id, ub.id, "pending")
    await insert_connection(db_session, ub.id, ua.id, "pending")

    assert await upgrade_pair_to_connected(db_session, ua.id, ub.id) == 2
    assert await upgrade_pair_to_connected(db_session, ub.id, ua.id) == 0


@pytest.mark.asyncio
async def test_find_reciprocal_only_matches_pending_rows_toward_actor(make_profile, db_session):
    ua = await make_profile()
    ub = await make_profile()
    await insert_connection(db_session, ua.id, ub.id, "pending")

    assert await find_reciprocal_pending(db_session, ua.id, ub.id) is None
    reciprocal = await find_reciprocal_pending(db_session, ub.id, ua.id)
    assert isinstance(reciprocal, Connection)
    assert reciprocal.user_id == ua.id


@pytest.mark.asyncio
async def test_discovery_excludes_self_swiped_and_inactive(make_profile, db_session):
    me = await make_profile()
    liked = await make_profile()
    passed = await make_profile()
    inactive = await make_profile(status="inactive")
    fresh = await make_profile()
    await insert_connection(db_session, me.id, liked.id, "pending")
    await insert_connection(db_session, me.id, passed.id, "rejected")

    candidates = await get_discovery_candidates(db_session, me.id, limit=10)

    assert [p.id for p in candidates] == [fresh.id]
    assert inactive.id not in {p.id for p in candidates}


@pytest.mark.asyncio
async def test_connections_are_reported_once_per_counterpart(swipe_service, make_profile, db_session):
    ua = await make_profile()
    ub = await make_profile()
    uc = await make_profile()
    await swipe_service.accept(ua.id, ub.id)
    await swipe_service.accept(ub.id, ua.id)
    await swipe_service.accept(uc.id, ua.id)

    connected = await get_connected_profiles(db_session, ua.id)
    assert [profile.id for profile, _ in connected] == [ub.id]

    incoming = await get_incoming_requests(db_session, ua.id)
    assert [(c.user_id, p.id) for c, p in incoming] == [(uc.id, uc.id)]

    counts = await count_connections(db_session, ua.id)
    assert counts.connected == 1
    assert counts.pending_incoming == 1
    assert counts.pending_outgoing == 0


@pytest.mark.asyncio
async def test_answered_request_is_neither_listed_nor_counted(swipe_service, background, make_profile, db_session):
    ua = await make_profile()
    uc = await make_profile()
    await swipe_service.accept(uc.id, ua.id)
    swipe_service.reject(ua.id, uc.id)
    await background.drain(1)

    assert await get_incoming_requests(db_session, ua.id) == []
    counts = await count_connections(db_session, ua.id)
    assert counts.pending_incoming == 0
    assert counts.pending_outgoing == 0


@pytest.mark.asyncio
async def test_repeated_accept_keeps_a_single_pending_row(swipe_service, make_profile, db_session):
    ua = await make_profile()
    ub = await make_profile()

    first = await swipe_service.accept(ua.id, ub.id)
    second = await swipe_service.accept(ua.id, ub.id)

    assert first.outcome == second.outcome == SwipeOutcome.REQUEST_SENT
    assert await statuses(db_session, ua.id, ub.id) == [(True, "pending")]
    counts = await count_connections(db_session, ua.id)
    assert counts.pending_outgoing == 1


@pytest.mark.asyncio
async def test_insert_after_connect_returns_the_connected_row(make_profile, db_session):
    ua = await make_profile()
    ub = await make_profile()
    await insert_connection(db_session, ua.id, ub.id, "pending")
    await insert_connection(db_session, ub.id, ua.id, "pending")
    await upgrade_pair_to_connected(db_session, ua.id, ub.id)

    again = await insert_connection(db_session, ua.id, ub.id, "pending")

    assert again.status == "connected"
    assert len(await get_pair_rows(db_session, ua.id, ub.id)) == 2
