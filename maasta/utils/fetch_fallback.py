"""
Fetch-with-fallback helpers.

A primary (joined) query is raced against a deadline and retried a bounded
number of times on transient failures. When it is exhausted, or fails with a
non-retryable error, a simpler fallback query runs exactly once. The result is
tagged with the shape that produced it so mapping is resolved here and never
guessed downstream.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError

from maasta.core.config import settings
from maasta.core.exceptions import FetchFailedError, RecordNotFoundError, RetryableFetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")

PRIMARY_STAGE = "primary"
FALLBACK_STAGE = "fallback"

RETRYABLE_ERRORS = (
    asyncio.TimeoutError,
    RetryableFetchError,
    ConnectionError,
    OSError,
    OperationalError,
    InterfaceError,
    DisconnectionError,
)


@dataclass(frozen=True)
class FullShape(Generic[T]):
    """Row(s) from the primary query, relations included."""
    row: T


@dataclass(frozen=True)
class DegradedShape(Generic[T]):
    """Row(s) from the fallback query, relations absent."""
    row: T


FetchResult = Union[FullShape, DegradedShape]


def is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, RecordNotFoundError):
        return False
    return isinstance(exc, RETRYABLE_ERRORS)


def _log_late_outcome(label: str):
    def callback(task: asyncio.Future):
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(f"{label}: abandoned operation failed after its deadline: {exc!r}")
        else:
            logger.info(f"{label}: abandoned operation completed after its deadline")
    return callback


async def await_with_deadline(task: "asyncio.Future[T]", timeout: float, label: str) -> T:
    """
    Wait at most `timeout` seconds for an already running task.

    On timeout the caller stops waiting and `asyncio.TimeoutError` is raised,
    but the task itself is not cancelled: it finishes in the background and
    its outcome is only logged.
    """
    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{label}: no response within {timeout}s")
        task.add_done_callback(_log_late_outcome(label))
        raise


async def run_with_deadline(operation: Callable[[], Awaitable[T]], timeout: float, label: str) -> T:
    """Start `operation()` and await it for at most `timeout` seconds."""
    return await await_with_deadline(asyncio.ensure_future(operation()), timeout, label)


async def fetch_with_fallback(
    primary: Callable[[], Awaitable[Any]],
    fallback: Callable[[], Awaitable[Any]],
    *,
    label: str,
    timeout: Optional[float] = None,
    max_retries: Optional[int] = None,
    retry_delay: Optional[float] = None,
) -> FetchResult:
    """
    Run `primary` up to `max_retries + 1` times, then `fallback` at most once.

    Raises FetchFailedError when the fallback fails too; its `cause` is the
    fallback error and `primary_error` the last primary error.
    """
    timeout = settings.FETCH_TIMEOUT_SECONDS if timeout is None else timeout
    max_retries = settings.FETCH_MAX_RETRIES if max_retries is None else max_retries
    retry_delay = settings.FETCH_RETRY_DELAY if retry_delay is None else retry_delay

    attempt = 0
    primary_error: Optional[Exception] = None
    while True:
        attempt += 1
        try:
            row = await run_with_deadline(primary, timeout, f"{label} (attempt {attempt})")
            if attempt > 1:
                logger.info(f"{label}: primary query succeeded on attempt {attempt}")
            return FullShape(row)
        except Exception as exc:
            primary_error = exc
            if not is_retryable(exc):
                logger.info(f"{label}: primary query failed with {exc!r}, trying fallback query")
                break
            if attempt > max_retries:
                logger.warning(f"{label}: primary query failed after {attempt} attempts, trying fallback query")
                break
            logger.warning(
                f"{label}: attempt {attempt} failed with {exc!r}, retrying in {retry_delay}s "
                f"({max_retries - attempt + 1} retries left)"
            )
            await asyncio.sleep(retry_delay)

    try:
        row = await run_with_deadline(fallback, timeout, f"{label} (fallback)")
    except Exception as exc:
        logger.error(f"{label}: fallback query failed: {exc!r}")
        raise FetchFailedError(label, FALLBACK_STAGE, exc, primary_error=primary_error) from exc

    logger.info(f"{label}: served from fallback query")
    return DegradedShape(row)


def map_fetch_result(
    result: FetchResult,
    full_mapper: Callable[[Any], T],
    degraded_mapper: Callable[[Any], T],
) -> T:
    if isinstance(result, FullShape):
        return full_mapper(result.row)
    if isinstance(result, DegradedShape):
        return degraded_mapper(result.row)
    raise TypeError(f"Unknown fetch result shape: {type(result).__name__}")
