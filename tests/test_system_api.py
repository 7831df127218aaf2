import pytest


@pytest.mark.asyncio
async def test_cache_version_staleness(client, cache_manager):
    current = cache_manager.version

    fresh = await client.get("/api/system/cache-version", params={"client_version": current})
    assert fresh.json() == {"version": current, "stale": False}

    first_visit = await client.get("/api/system/cache-version")
    assert first_visit.json()["stale"] is False

    stale = await client.get("/api/system/cache-version", params={"client_version": "0-deadbeef"})
    assert stale.json() == {"version": current, "stale": True}


@pytest.mark.asyncio
async def test_bust_requires_auth_and_rotates_version(client, cache_manager, make_profile, auth_headers):
    admin = await make_profile()
    before = cache_manager.version
    cache_manager.set("artist:x", {"full_name": "cached"})

    unauthenticated = await client.post("/api/system/cache/bust")
    assert unauthenticated.status_code == 401

    response = await client.post("/api/system/cache/bust", headers=auth_headers(admin.id))

    assert response.status_code == 200
    assert response.json()["version"] != before
    assert cache_manager.get("artist:x") is None

    old_client = await client.get("/api/system/cache-version", params={"client_version": before})
    assert old_client.json()["stale"] is True


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/")
    assert response.status_code == 200
