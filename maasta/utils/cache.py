"""
Versioned in-memory cache.

One CacheVersionManager is built when the application is constructed and
handed to whoever needs it. Every key it stores carries the current version,
so bumping the version orphans all earlier entries at once.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from uuid import uuid4

from maasta.core.config import settings

logger = logging.getLogger(__name__)


class CacheVersionManager:
    def __init__(
        self,
        prefix: str = None,
        ttl_seconds: int = None,
        refresh_interval_seconds: int = None,
    ):
        self._prefix = prefix or settings.CACHE_PREFIX
        self._ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.CACHE_TTL_SECONDS
        self._refresh_interval = timedelta(
            seconds=refresh_interval_seconds
            if refresh_interval_seconds is not None
            else settings.CACHE_REFRESH_INTERVAL_SECONDS
        )
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._version: Optional[str] = None
        self._last_clear: Optional[datetime] = None

    @staticmethod
    def _new_version() -> str:
        return f"{int(datetime.utcnow().timestamp() * 1000)}-{uuid4().hex[:8]}"

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def initialized(self) -> bool:
        return self._version is not None

    @property
    def version(self) -> str:
        return self.initialize()

    def initialize(self) -> str:
        """Clear everything and stamp a version. Later calls are no-ops."""
        if self._version is None:
            logger.info("Initializing cache manager - clearing all caches")
            self.clear_all()
            self._version = self._new_version()
        return self._version

    def check_version(self, client_version: Optional[str]) -> bool:
        """True when the caller holds data stamped with an older version."""
        current = self.version
        stale = bool(client_version) and client_version != current
        if stale:
            logger.info(f"Version mismatch detected: client {client_version}, current {current}")
        return stale

    def bust(self) -> str:
        self._version = self._new_version()
        self.clear_all()
        logger.info(f"Cache busted, new version {self._version}")
        return self._version

    def clear_all(self) -> None:
        keys = [key for key in self._cache if key.startswith(self._prefix)]
        for key in keys:
            del self._cache[key]
        self._last_clear = datetime.utcnow()
        logger.debug(f"Cleared {len(keys)} cache entries")

    def invalidate(self, pattern: Optional[str] = None) -> int:
        """Remove entries whose key contains `pattern`, or everything when no pattern is given"""
        if pattern is None:
            count = len(self._cache)
            self.clear_all()
            return count
        keys = [key for key in self._cache if pattern in key]
        for key in keys:
            del self._cache[key]
        return len(keys)

    def get_cache_key(self, key: str) -> str:
        return f"{self._prefix}{key}_{self.version}"

    def _is_expired(self, cache_entry: Dict[str, Any]) -> bool:
        return datetime.utcnow() > cache_entry["expires_at"]

    def get(self, key: str) -> Optional[Any]:
        cache_key = self.get_cache_key(key)
        entry = self._cache.get(cache_key)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._cache[cache_key]
            return None
        return entry["value"]

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ttl = self._ttl_seconds if ttl_seconds is None else ttl_seconds
        self._cache[self.get_cache_key(key)] = {
            "value": value,
            "expires_at": datetime.utcnow() + timedelta(seconds=ttl),
        }

    def cleanup_expired(self) -> int:
        expired_keys = [key for key, entry in self._cache.items() if self._is_expired(entry)]
        for key in expired_keys:
            del self._cache[key]
        return len(expired_keys)

    def should_refresh(self, now: Optional[datetime] = None) -> bool:
        """True at most once per refresh interval"""
        now = now or datetime.utcnow()
        if self._last_clear is None or now - self._last_clear > self._refresh_interval:
            self._last_clear = now
            return True
        return False

    def __len__(self) -> int:
        return len(self._cache)


class CacheMaintenance:
    """Periodic sweep that drops expired entries and clears the cache once per refresh interval"""

    def __init__(self, cache: CacheVersionManager, interval_seconds: float = None):
        self.cache = cache
        self.interval = interval_seconds if interval_seconds is not None else settings.CACHE_CLEANUP_INTERVAL_SECONDS
        self.running = False
        self._task: Optional[asyncio.Task] = None

    def run_once(self) -> int:
        removed = self.cache.cleanup_expired()
        if removed:
            logger.debug(f"Removed {removed} expired cache entries")
        if self.cache.should_refresh():
            logger.info("Refresh interval elapsed - clearing all caches")
            self.cache.clear_all()
        return removed

    async def start(self):
        if self.running:
            logger.warning("Cache maintenance is already running")
            return
        self.running = True
        self._task = asyncio.create_task(self._loop())

    async def stop(self):
        if not self.running:
            return
        self.running = False
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        self._task = None

    async def _loop(self):
        while self.running:
            try:
                await asyncio.sleep(self.interval)
                self.run_once()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in cache maintenance: {str(e)}")
