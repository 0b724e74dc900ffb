"""
Credential store backed by a Redis list.

Each record is one JSON object in the list. Records are append-only: this
store never mutates or deletes them. Every stored object carries an
internal identifier that queries strip before handing records out.
"""

import json
import logging
import uuid
from typing import Dict, List

from redis.exceptions import RedisError

from ...exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

INTERNAL_ID_FIELD = "_id"


class CredentialStore:
    """Append-only credential record store."""

    def __init__(self, redis_client, key: str = "auth:credentials"):
        """
        Initialize credential store.

        Args:
            redis_client: Async Redis client (decode_responses=True)
            key: Redis list holding the records
        """
        self.redis = redis_client
        self.key = key

    async def connect(self) -> bool:
        """
        Verify the store is reachable.

        Returns:
            True if Redis answered a PING, False otherwise
        """
        try:
            return bool(await self.redis.ping())
        except (RedisError, OSError) as e:
            logger.error(f"Credential store unreachable: {e}")
            return False

    async def query_all(self) -> List[Dict[str, str]]:
        """
        Get every stored record in insertion order.

        Returns:
            Records with the internal identifier removed

        Raises:
            StoreUnavailable: If Redis cannot be queried
        """
        try:
            raw_records = await self.redis.lrange(self.key, 0, -1)
        except (RedisError, OSError) as e:
            raise StoreUnavailable(f"Failed to query credential store: {e}") from e

        records = []
        for raw in raw_records:
            try:
                record = json.loads(raw)
            except (TypeError, json.JSONDecodeError):
                # Unreadable entries are left in place for the operator to inspect
                logger.warning(f"Skipping unreadable credential record in {self.key}")
                continue
            if not isinstance(record, dict):
                logger.warning(f"Skipping non-object credential record in {self.key}")
                continue
            record.pop(INTERNAL_ID_FIELD, None)
            records.append(record)

        return records

    async def insert(self, record: Dict[str, str]) -> bool:
        """
        Append a record.

        Args:
            record: Credential fields to store

        Returns:
            True if the record was written, False otherwise
        """
        document = {**record, INTERNAL_ID_FIELD: uuid.uuid4().hex}

        try:
            length = await self.redis.rpush(self.key, json.dumps(document))
        except (RedisError, OSError) as e:
            logger.error(f"Failed to write credential record: {e}")
            return False

        logger.info(f"Stored credential record {document[INTERNAL_ID_FIELD]} ({length} in pool)")
        return bool(length)

    async def count(self) -> int:
        """
        Get number of stored records.

        Raises:
            StoreUnavailable: If Redis cannot be queried
        """
        try:
            return await self.redis.llen(self.key)
        except (RedisError, OSError) as e:
            raise StoreUnavailable(f"Failed to query credential store: {e}") from e
