"""
Authentication Service Facade following Black Box Design principles.

This module provides:
- A single interface over credential rotation, guest tokens and
  observed-credential capture
- Explicit lifecycle: built by AuthFactory, closed by the owner
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional

from .cookies import HeadersLike
from .guest import GuestTokenCache
from .interfaces import AuthCredentials, GuestCredentials
from .rotator import CredentialRotator

logger = logging.getLogger(__name__)


class AuthService:
    """
    Facade over the credential rotator and guest token cache.

    One instance is built per process and passed to whatever issues
    platform requests. Rotation and guest refresh are serialized
    internally, so concurrent coroutines in one event loop are safe.
    """

    def __init__(
        self,
        rotator: CredentialRotator,
        guest_cache: GuestTokenCache,
        closers: Optional[List[Callable[[], Awaitable[Any]]]] = None,
    ):
        """
        Initialize with injected components.

        Args:
            rotator: Credential rotator (already opened)
            guest_cache: Guest token cache
            closers: Coroutine functions releasing resources this service owns
        """
        self._rotator = rotator
        self._guest = guest_cache
        self._closers = list(closers or [])

    @property
    def rotator(self) -> CredentialRotator:
        return self._rotator

    @property
    def guest_cache(self) -> GuestTokenCache:
        return self._guest

    async def get_current_or_next_credential(self, rotate: bool = True) -> AuthCredentials:
        """
        Get user credentials for the next platform request.

        Args:
            rotate: Move to the next credential in the pool first

        Returns:
            AuthCredentials with auth token, csrf token and cookie

        Raises:
            EmptyCredentialSet: If the pool is empty (or nothing is active and rotate is False)
            StoreUnavailable: If refreshing the pool cannot reach the store
        """
        if rotate:
            return await self._rotator.advance()
        return self._rotator.current()

    async def get_guest_credential(self, force_refresh: bool = False) -> GuestCredentials:
        """
        Get guest credentials for anonymous requests.

        Args:
            force_refresh: Fetch a new guest token even if one is cached

        Raises:
            GuestTokenFetchFailed: If fetching failed
        """
        return await self._guest.get(force_refresh)

    async def store_observed_credential(self, raw_headers: HeadersLike) -> bool:
        """
        Persist a credential observed in response headers.

        Returns:
            False if the headers carry no csrf token

        Raises:
            StoreWriteFailed: If the store rejected the write
        """
        return await self._rotator.record_observed(raw_headers)

    async def close(self) -> None:
        """Release resources created for this service."""
        while self._closers:
            closer = self._closers.pop()
            await closer()
        logger.debug("Authentication service closed")
