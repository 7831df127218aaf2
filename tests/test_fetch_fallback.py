import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from maasta.core.exceptions import FetchFailedError, RecordNotFoundError, RetryableFetchError
from maasta.utils.fetch_fallback import (
    FALLBACK_STAGE,
    DegradedShape,
    FullShape,
    fetch_with_fallback,
    is_retryable,
    map_fetch_result,
    run_with_deadline,
)


class Recorder:
    """Async callable that counts its calls and replays a scripted behaviour."""

    def __init__(self, behaviour):
        self.calls = 0
        self.behaviour = behaviour

    async def __call__(self):
        self.calls += 1
        return await self.behaviour(self.calls)


async def never_returns(_):
    await asyncio.sleep(1)


def fails_with(exc):
    async def behaviour(_):
        raise exc
    return behaviour


def returns(value):
    async def behaviour(_):
        return value
    return behaviour


@pytest.mark.asyncio
async def test_primary_success_is_full_shape():
    primary = Recorder(returns({"id": "1"}))
    fallback = Recorder(returns({"id": "fallback"}))

    result = await fetch_with_fallback(primary, fallback, label="t", timeout=1, max_retries=2, retry_delay=0)

    assert isinstance(result, FullShape)
    assert result.row == {"id": "1"}
    assert primary.calls == 1
    assert fallback.calls == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("max_retries", [0, 1, 3])
async def test_timeouts_retry_exactly_max_retries_then_fallback_once(max_retries):
    primary = Recorder(never_returns)
    fallback = Recorder(returns({"id": "bare"}))

    result = await fetch_with_fallback(
        primary, fallback, label="t", timeout=0.01, max_retries=max_retries, retry_delay=0
    )

    assert primary.calls == max_retries + 1
    assert fallback.calls == 1
    assert isinstance(result, DegradedShape)
    assert result.row == {"id": "bare"}


@pytest.mark.asyncio
async def test_recovers_on_a_later_attempt():
    async def flaky(call):
        if call < 3:
            raise OperationalError("SELECT 1", {}, Exception("connection reset"))
        return "ok"

    primary = Recorder(flaky)
    fallback = Recorder(returns("fallback"))

    result = await fetch_with_fallback(primary, fallback, label="t", timeout=1, max_retries=2, retry_delay=0)

    assert isinstance(result, FullShape)
    assert primary.calls == 3
    assert fallback.calls == 0


@pytest.mark.asyncio
async def test_not_found_skips_retries():
    primary = Recorder(fails_with(RecordNotFoundError("missing")))
    fallback = Recorder(returns("bare"))

    result = await fetch_with_fallback(primary, fallback, label="t", timeout=1, max_retries=5, retry_delay=0)

    assert primary.calls == 1
    assert fallback.calls == 1
    assert isinstance(result, DegradedShape)


@pytest.mark.asyncio
async def test_non_retryable_error_goes_straight_to_fallback():
    primary = Recorder(fails_with(ValueError("bad shape")))
    fallback = Recorder(returns("bare"))

    await fetch_with_fallback(primary, fallback, label="t", timeout=1, max_retries=5, retry_delay=0)

    assert primary.calls == 1
    assert fallback.calls == 1


@pytest.mark.asyncio
async def test_fallback_failure_names_the_stage():
    primary = Recorder(fails_with(RetryableFetchError("down")))
    fallback = Recorder(fails_with(RecordNotFoundError("gone")))

    with pytest.raises(FetchFailedError) as excinfo:
        await fetch_with_fallback(primary, fallback, label="artist x", timeout=1, max_retries=1, retry_delay=0)

    err = excinfo.value
    assert err.stage == FALLBACK_STAGE
    assert err.label == "artist x"
    assert isinstance(err.cause, RecordNotFoundError)
    assert isinstance(err.primary_error, RetryableFetchError)
    assert "fallback query failed" in str(err)
    assert primary.calls == 2
    assert fallback.calls == 1


@pytest.mark.asyncio
async def test_fallback_is_never_retried():
    primary = Recorder(never_returns)
    fallback = Recorder(never_returns)

    with pytest.raises(FetchFailedError):
        await fetch_with_fallback(primary, fallback, label="t", timeout=0.01, max_retries=0, retry_delay=0)

    assert fallback.calls == 1


@pytest.mark.asyncio
async def test_run_with_deadline_does_not_cancel_the_operation():
    finished = asyncio.Event()

    async def slow():
        await asyncio.sleep(0.05)
        finished.set()
        return "late"

    with pytest.raises(asyncio.TimeoutError):
        await run_with_deadline(slow, 0.01, "slow op")

    await asyncio.wait_for(finished.wait(), 1)
    assert finished.is_set()


def test_retryable_classification():
    assert is_retryable(asyncio.TimeoutError())
    assert is_retryable(RetryableFetchError("x"))
    assert is_retryable(ConnectionResetError())
    assert is_retryable(OperationalError("SELECT 1", {}, Exception("x")))
    assert not is_retryable(RecordNotFoundError("x"))
    assert not is_retryable(ValueError("x"))


def test_map_fetch_result_dispatches_on_shape():
    full = map_fetch_result(FullShape({"a": 1}), lambda r: ("full", r), lambda r: ("degraded", r))
    degraded = map_fetch_result(DegradedShape({"a": 1}), lambda r: ("full", r), lambda r: ("degraded", r))

    assert full == ("full", {"a": 1})
    assert degraded == ("degraded", {"a": 1})

    with pytest.raises(TypeError):
        map_fetch_result({"a": 1}, lambda r: r, lambda r: r)
