"""
Credential rotation over a persisted credential pool.

The rotator owns an in-memory snapshot of the store's records and an index
into it. Each pass over the snapshot hands out every record exactly once,
in store order; when a pass ends the snapshot is re-read from the store
before the next pass starts, so records added in the meantime join the
rotation. Mid-pass, only emptiness of the store is checked: an emptied
store fails the next advance instead of yielding a stale record.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from .cookies import HeadersLike, cookie_string_from_headers, extract_csrf_token
from .interfaces import COOKIE_FIELD, CSRF_TOKEN_FIELD, AuthCredentials, CredentialStoreProtocol
from ...exceptions import EmptyCredentialSet, StoreUnavailable, StoreWriteFailed

logger = logging.getLogger(__name__)


class CredentialRotator:
    """
    Hands out one credential at a time from a store, cycling indefinitely.

    Not shared across processes: every process holds its own position.
    """

    def __init__(
        self,
        store: CredentialStoreProtocol,
        auth_token: str,
        bootstrap_record: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize rotator.

        Args:
            store: Credential store to rotate through
            auth_token: Shared platform auth token stamped on every credential
            bootstrap_record: Record to treat as current before the first rotation
        """
        self.store = store
        self.auth_token = auth_token

        self._snapshot: List[Dict[str, str]] = []
        self._index = 0
        self._stale = True
        self._lock = asyncio.Lock()

        self._current: Optional[AuthCredentials] = None
        if bootstrap_record:
            self._current = AuthCredentials.from_record(auth_token, bootstrap_record)

    @property
    def position(self) -> int:
        """Index of the record the next advance() returns."""
        return self._index

    @property
    def pool_size(self) -> int:
        """Number of records in the current snapshot."""
        return len(self._snapshot)

    async def open(self) -> None:
        """
        Connect to the store and take the first snapshot.

        Raises:
            StoreUnavailable: If the store cannot be reached
            EmptyCredentialSet: If the store holds no records
        """
        async with self._lock:
            try:
                connected = await self.store.connect()
            except StoreUnavailable:
                raise
            except Exception as e:
                raise StoreUnavailable(f"Failed to connect to credential store: {e}") from e

            if not connected:
                raise StoreUnavailable("Credential store did not accept the connection")

            await self._refresh()

    async def advance(self) -> AuthCredentials:
        """
        Move to the next credential and return it.

        Returns:
            The next record in store order, stamped with the shared auth token

        Raises:
            EmptyCredentialSet: If the store holds no records, including a store
                emptied partway through a pass
            StoreUnavailable: If the store cannot be reached
        """
        async with self._lock:
            if self._stale or not self._snapshot:
                await self._refresh()
            elif await self.store.count() == 0:
                # Emptied mid-pass - never hand out a record the store no longer holds
                self._snapshot = []
                self._index = 0
                self._stale = True
                raise EmptyCredentialSet("Credential store was emptied during rotation")

            record = self._snapshot[self._index]
            self._current = AuthCredentials.from_record(self.auth_token, record)
            logger.debug(f"Rotated to credential {self._index + 1}/{len(self._snapshot)}")

            self._index += 1
            if self._index >= len(self._snapshot):
                # Pass complete - start over from a fresh snapshot
                self._index = 0
                self._stale = True

            return self._current

    def current(self) -> AuthCredentials:
        """
        Get the active credential without rotating.

        Returns:
            The last credential advanced to, or the bootstrap credential

        Raises:
            EmptyCredentialSet: If nothing has been advanced to and no bootstrap exists
        """
        if self._current is None:
            raise EmptyCredentialSet("No credential is active yet and no bootstrap credential is configured")
        return self._current

    async def record_observed(self, raw_headers: HeadersLike) -> bool:
        """
        Store the credential carried by observed response headers.

        Args:
            raw_headers: Response headers or already collapsed cookie text

        Returns:
            True if a credential was stored, False if the cookies carry no csrf token

        Raises:
            StoreWriteFailed: If the store reports a failed write
        """
        cookie_text = cookie_string_from_headers(raw_headers)
        csrf_token = extract_csrf_token(cookie_text)

        if not csrf_token:
            logger.debug("Observed cookies carry no csrf token - nothing to store")
            return False

        record = {CSRF_TOKEN_FIELD: csrf_token, COOKIE_FIELD: cookie_text}
        if not await self.store.insert(record):
            raise StoreWriteFailed("Credential store rejected the observed credential")

        logger.info("Stored observed credential")
        return True

    async def _refresh(self) -> None:
        """Re-read the store into the snapshot. Caller holds the lock."""
        records = await self.store.query_all()

        self._snapshot = list(records)
        self._index = 0
        self._stale = False

        if not self._snapshot:
            raise EmptyCredentialSet("Credential store holds no records")

        logger.info(f"Loaded {len(self._snapshot)} credential(s) for rotation")
