"""
Unit tests for the Redis-backed credential store.
"""

import json
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from rotauth.exceptions import StoreUnavailable
from rotauth.modules.storage import CredentialStore, StorageModule
from rotauth.modules.storage.credentials import INTERNAL_ID_FIELD


@pytest.fixture
def store(mock_redis_with_data):
    """Create a CredentialStore over the in-memory Redis mock."""
    return CredentialStore(mock_redis_with_data, key="test:credentials")


@pytest.mark.asyncio
async def test_connect_pings(store):
    """Test connect() reports a reachable store."""
    assert await store.connect() is True


@pytest.mark.asyncio
async def test_connect_failure_returns_false(mock_redis):
    """Test connect() reports an unreachable store without raising."""
    mock_redis.ping.side_effect = RedisConnectionError("refused")

    assert await CredentialStore(mock_redis).connect() is False


@pytest.mark.asyncio
async def test_insert_adds_internal_id(store, mock_redis_with_data):
    """Test inserted records carry an internal identifier in storage."""
    assert await store.insert({"csrf_token": "abc", "cookie": "ct0=abc;"}) is True

    raw = mock_redis_with_data._storage["test:credentials"]
    assert len(raw) == 1
    document = json.loads(raw[0])
    assert document["csrf_token"] == "abc"
    assert len(document[INTERNAL_ID_FIELD]) == 32


@pytest.mark.asyncio
async def test_query_all_projects_away_internal_id(store):
    """Test query_all() returns records in insertion order without the identifier."""
    await store.insert({"csrf_token": "one", "cookie": "ct0=one;"})
    await store.insert({"csrf_token": "two", "cookie": "ct0=two;"})

    records = await store.query_all()

    assert records == [
        {"csrf_token": "one", "cookie": "ct0=one;"},
        {"csrf_token": "two", "cookie": "ct0=two;"},
    ]
    assert await store.count() == 2


@pytest.mark.asyncio
async def test_query_all_skips_unreadable_entries(store, mock_redis_with_data):
    """Test corrupt entries are skipped rather than failing the whole query."""
    mock_redis_with_data._storage["test:credentials"] = [
        "not json",
        json.dumps(["a", "list"]),
        json.dumps({INTERNAL_ID_FIELD: "x", "csrf_token": "ok", "cookie": "ct0=ok;"}),
    ]

    records = await store.query_all()

    assert records == [{"csrf_token": "ok", "cookie": "ct0=ok;"}]


@pytest.mark.asyncio
async def test_query_failure_raises(mock_redis):
    """Test an unreachable store raises StoreUnavailable on query."""
    mock_redis.lrange.side_effect = RedisConnectionError("gone")

    with pytest.raises(StoreUnavailable):
        await CredentialStore(mock_redis).query_all()


@pytest.mark.asyncio
async def test_insert_failure_returns_false(mock_redis):
    """Test a failed write is reported, not raised."""
    mock_redis.rpush.side_effect = RedisConnectionError("gone")

    assert await CredentialStore(mock_redis).insert({"csrf_token": "a", "cookie": "ct0=a;"}) is False


@pytest.mark.asyncio
async def test_insert_uses_configured_key(mock_redis):
    """Test records are appended to the configured list."""
    store = CredentialStore(mock_redis, key="pool")

    await store.insert({"csrf_token": "a", "cookie": "ct0=a;"})

    mock_redis.rpush.assert_called_once()
    assert mock_redis.rpush.call_args[0][0] == "pool"


@pytest.mark.asyncio
async def test_storage_module_reuses_and_closes_client(monkeypatch):
    """Test StorageModule creates one client and closes it on disconnect."""
    client = AsyncMock()
    created = []

    def fake_from_url(url, **kwargs):
        created.append((url, kwargs))
        return client

    monkeypatch.setattr("rotauth.modules.storage.redis.from_url", fake_from_url)
    storage = StorageModule("redis://cache:6379/2")

    assert await storage.connect() is client
    assert await storage.connect() is client
    assert created == [("redis://cache:6379/2", {"decode_responses": True})]

    await storage.disconnect()
    client.aclose.assert_awaited_once()
