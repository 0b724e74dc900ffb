"""
Storage Module - Black Box Interface

Purpose: Abstract credential persistence
Interface: StorageModule.connect()/disconnect(), CredentialStore.connect()/query_all()/insert()
Hidden: Redis specifics, record serialization, internal record identifiers

Can be replaced with any storage backend without affecting other modules.
"""

import logging
import os
from typing import Optional

import redis.asyncio as redis

from .credentials import CredentialStore

logger = logging.getLogger(__name__)


class StorageModule:
    """Black box storage connection lifecycle."""

    def __init__(self, connection_url: Optional[str] = None):
        """Initialize storage with connection URL."""
        self.url = connection_url or os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self._client: Optional[redis.Redis] = None

    async def connect(self) -> redis.Redis:
        """Get storage connection."""
        if not self._client:
            self._client = redis.from_url(self.url, decode_responses=True)
            logger.debug(f"Created Redis client for {self.url.split('@')[-1]}")
        return self._client

    async def disconnect(self):
        """Close storage connection."""
        if self._client:
            await self._client.aclose()
            self._client = None


__all__ = ["StorageModule", "CredentialStore"]
