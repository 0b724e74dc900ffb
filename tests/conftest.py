"""
Shared pytest fixtures for rotauth tests.

This module provides common fixtures including:
- Redis mocks for credential store tests
- An in-memory credential store for rotation tests
- httpx mock transports for guest token tests
"""

import json
from typing import Callable, Dict, List
from unittest.mock import AsyncMock

import httpx
import pytest


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================

@pytest.fixture
def mock_redis():
    """Create a mock Redis client for async list operations."""
    redis = AsyncMock()

    redis.ping = AsyncMock(return_value=True)
    redis.lrange = AsyncMock(return_value=[])
    redis.rpush = AsyncMock(return_value=1)
    redis.llen = AsyncMock(return_value=0)
    redis.aclose = AsyncMock()

    return redis


@pytest.fixture
def mock_redis_with_data():
    """
    Redis mock with in-memory list storage for more realistic tests.

    This allows testing code that reads back what it writes.
    """
    storage: Dict[str, List[str]] = {}

    redis = AsyncMock()

    async def mock_ping():
        return True

    async def mock_rpush(key, *values):
        storage.setdefault(key, []).extend(values)
        return len(storage[key])

    async def mock_lrange(key, start, end):
        items = storage.get(key, [])
        stop = len(items) if end == -1 else end + 1
        return list(items[start:stop])

    async def mock_llen(key):
        return len(storage.get(key, []))

    redis.ping = mock_ping
    redis.rpush = mock_rpush
    redis.lrange = mock_lrange
    redis.llen = mock_llen
    redis._storage = storage  # Expose for test assertions

    return redis


# =============================================================================
# Credential Store Double
# =============================================================================

class InMemoryCredentialStore:
    """Credential store double recording every call."""

    def __init__(self, records=None, connected: bool = True):
        self.records = [dict(r) for r in (records or [])]
        self.connected = connected
        self.insert_result = True
        self.query_count = 0
        self.inserted: List[Dict[str, str]] = []

    async def connect(self) -> bool:
        return self.connected

    async def query_all(self) -> List[Dict[str, str]]:
        self.query_count += 1
        return [dict(r) for r in self.records]

    async def count(self) -> int:
        return len(self.records)

    async def insert(self, record: Dict[str, str]) -> bool:
        self.inserted.append(dict(record))
        if self.insert_result:
            self.records.append(dict(record))
        return self.insert_result


@pytest.fixture
def credential_records():
    """Three distinct credential records."""
    return [
        {"csrf_token": f"csrf{i}", "cookie": f"auth_token=tok{i}; ct0=csrf{i};"}
        for i in range(1, 4)
    ]


@pytest.fixture
def memory_store(credential_records):
    """In-memory store pre-filled with three records."""
    return InMemoryCredentialStore(credential_records)


# =============================================================================
# HTTP Mocking Infrastructure
# =============================================================================

class GuestEndpoint:
    """
    Scripted guest token endpoint for httpx.MockTransport.

    Usage:
        endpoint = GuestEndpoint(["tok-1", "tok-2"])
        client = endpoint.client()
    """

    def __init__(self, tokens=None):
        self.tokens = list(tokens or ["guest-1"])
        self.requests: List[httpx.Request] = []
        self.fail_with: Callable[[httpx.Request], httpx.Response] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return self.fail_with(request)
        token = self.tokens[min(len(self.requests), len(self.tokens)) - 1]
        return httpx.Response(200, content=json.dumps({"guest_token": token}))

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def guest_endpoint():
    """Guest endpoint handing out guest-1, guest-2, guest-3 in order."""
    return GuestEndpoint(["guest-1", "guest-2", "guest-3"])


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring a live Redis"
    )
