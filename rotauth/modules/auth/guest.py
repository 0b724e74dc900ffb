"""
Guest token cache.

Fetches an anonymous guest token from the platform using only the shared
auth token and keeps it until a caller forces a refresh. There is no
expiry and no retry: callers refresh after seeing an authorization
failure downstream.
"""

import asyncio
import logging
from typing import Dict, Optional

import httpx

from .interfaces import GuestCredentials
from ...exceptions import GuestTokenFetchFailed

logger = logging.getLogger(__name__)


def guest_headers(auth_token: str) -> Dict[str, str]:
    """Headers for a request carrying only the shared auth token."""
    return {
        "authorization": f"Bearer {auth_token}",
        "accept": "application/json",
        "content-type": "application/x-www-form-urlencoded",
    }


class GuestTokenCache:
    """Memoizes one guest token per process."""

    def __init__(
        self,
        auth_token: str,
        guest_token_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize guest token cache.

        Args:
            auth_token: Shared platform auth token
            guest_token_url: Guest token activation endpoint
            http_client: Optional shared async HTTP client
            timeout: Request timeout in seconds when no client is injected
        """
        self.auth_token = auth_token
        self.guest_token_url = guest_token_url
        self.http_client = http_client
        self.timeout = timeout

        self._cached = GuestCredentials(auth_token=auth_token)
        self._lock = asyncio.Lock()

        # Track fetches for metrics
        self.fetch_count = 0

    @property
    def cached(self) -> GuestCredentials:
        """Currently cached guest credentials (guest_token is empty until the first fetch)."""
        return self._cached

    async def get(self, force_refresh: bool = False) -> GuestCredentials:
        """
        Get guest credentials.

        Args:
            force_refresh: Fetch a new token even if one is cached

        Returns:
            Guest credentials with a non-empty guest token

        Raises:
            GuestTokenFetchFailed: If a fetch was needed and failed; the cache is unchanged
        """
        async with self._lock:
            if force_refresh or not self._cached.guest_token:
                guest_token = await self._fetch()
                self._cached = GuestCredentials(auth_token=self.auth_token, guest_token=guest_token)

            return self._cached

    def invalidate(self) -> None:
        """Drop the cached token so the next get() fetches a new one."""
        self._cached = GuestCredentials(auth_token=self.auth_token)

    async def _fetch(self) -> str:
        """Request a new guest token from the platform."""
        self.fetch_count += 1

        try:
            if self.http_client is not None:
                response = await self._post(self.http_client)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._post(client)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Guest token request rejected with status {e.response.status_code}")
            raise GuestTokenFetchFailed(
                f"Guest token endpoint returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Guest token request failed: {e!r}")
            raise GuestTokenFetchFailed(f"Guest token request failed: {e}") from e
        except ValueError as e:
            logger.warning("Guest token response is not JSON")
            raise GuestTokenFetchFailed("Guest token response is not valid JSON") from e

        guest_token = data.get("guest_token") if isinstance(data, dict) else None
        if not guest_token:
            raise GuestTokenFetchFailed("Guest token response carries no guest_token")

        logger.info("Fetched new guest token")
        return str(guest_token)

    async def _post(self, client: httpx.AsyncClient) -> httpx.Response:
        return await client.post(self.guest_token_url, headers=guest_headers(self.auth_token))
