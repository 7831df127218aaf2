import asyncio
from datetime import datetime, timedelta

import pytest

from maasta.utils.cache import CacheMaintenance, CacheVersionManager


@pytest.fixture
def manager():
    return CacheVersionManager(prefix="app_", ttl_seconds=60, refresh_interval_seconds=3600)


def test_initialize_is_init_once(manager):
    manager._cache["app_stale_entry"] = {"value": 1, "expires_at": datetime.utcnow() + timedelta(seconds=60)}
    manager._cache["other_entry"] = {"value": 2, "expires_at": datetime.utcnow() + timedelta(seconds=60)}

    version = manager.initialize()

    assert manager.initialized
    assert "app_stale_entry" not in manager._cache
    assert "other_entry" in manager._cache

    manager.set("artist:1", "cached")
    assert manager.initialize() == version
    assert manager.get("artist:1") == "cached"


def test_version_property_initializes_lazily(manager):
    assert not manager.initialized
    version = manager.version
    assert manager.initialized
    assert manager.version == version


def test_check_version(manager):
    current = manager.initialize()

    assert manager.check_version(current) is False
    assert manager.check_version(None) is False
    assert manager.check_version("") is False
    assert manager.check_version("1700000000000-deadbeef") is True


def test_bust_issues_new_version_and_clears(manager):
    old = manager.initialize()
    manager.set("artist:1", "cached")

    new = manager.bust()

    assert new != old
    assert manager.version == new
    assert manager.get("artist:1") is None
    assert manager.check_version(old) is True
    assert len(manager) == 0


def test_cache_key_carries_prefix_and_version(manager):
    version = manager.initialize()
    assert manager.get_cache_key("artist:42") == f"app_artist:42_{version}"


def test_invalidate_removes_only_matching_keys(manager):
    manager.initialize()
    manager.set("artist:1", "one")
    manager.set("artist:2", "two")

    removed = manager.invalidate("artist:1")

    assert removed == 1
    assert manager.get("artist:1") is None
    assert manager.get("artist:2") == "two"

    assert manager.invalidate() == 1
    assert len(manager) == 0


def test_ttl_expiry(manager):
    manager.initialize()
    manager.set("short", "value", ttl_seconds=-1)
    manager.set("long", "value")

    assert manager.get("short") is None
    manager.set("short-2", "value", ttl_seconds=-1)
    assert manager.cleanup_expired() == 1
    assert manager.get("long") == "value"


def test_should_refresh_at_most_once_per_interval(manager):
    manager.initialize()
    now = datetime.utcnow()

    assert manager.should_refresh(now) is False
    later = now + timedelta(hours=2)
    assert manager.should_refresh(later) is True
    assert manager.should_refresh(later + timedelta(minutes=5)) is False


def test_should_refresh_before_initialize(manager):
    assert manager.should_refresh() is True
    assert manager.should_refresh() is False


def test_maintenance_sweeps_expired_entries(manager):
    manager.initialize()
    manager.set("gone", "value", ttl_seconds=-1)
    manager.set("kept", "value")

    removed = CacheMaintenance(manager, interval_seconds=60).run_once()

    assert removed == 1
    assert len(manager) == 1
    assert manager.get("kept") == "value"


def test_maintenance_clears_everything_once_the_refresh_interval_passes():
    manager = CacheVersionManager(prefix="app_", ttl_seconds=60, refresh_interval_seconds=-1)
    manager.initialize()
    manager.set("artist:1", "cached")

    CacheMaintenance(manager, interval_seconds=60).run_once()

    assert manager.get("artist:1") is None


@pytest.mark.asyncio
async def test_maintenance_loop_runs_until_stopped(manager):
    manager.initialize()
    manager.set("gone", "value", ttl_seconds=-1)
    maintenance = CacheMaintenance(manager, interval_seconds=0.01)

    await maintenance.start()
    await asyncio.sleep(0.05)
    await maintenance.stop()

    assert len(manager) == 0
    assert not maintenance.running
