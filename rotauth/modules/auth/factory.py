"""
Authentication Factory following Black Box Design principles.

This factory:
- Constructs the authentication stack based on configuration
- Connects to the credential store before handing anything out
- Returns only the service facade (hiding implementation)
"""

import logging
from typing import Any, Optional

import httpx

from .guest import GuestTokenCache
from .rotator import CredentialRotator
from .service import AuthService
from ..storage import CredentialStore, StorageModule
from ...config.provider import ConfigProvider
from ...exceptions import EmptyCredentialSet

logger = logging.getLogger(__name__)


class AuthFactory:
    """
    Factory for building the authentication stack.

    This is the composition root that:
    - Creates all auth components
    - Wires them together via dependency injection
    - Returns only the public interface
    """

    @staticmethod
    async def build(
        config_provider: ConfigProvider,
        redis_client: Optional[Any] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> AuthService:
        """
        Build and open the complete authentication stack.

        Args:
            config_provider: Configuration provider
            redis_client: Optional async Redis client; created from config if omitted
            http_client: Optional async HTTP client for guest token requests

        Returns:
            AuthService facade, connected and ready to use

        Raises:
            StoreUnavailable: If the credential store cannot be reached

        An empty credential pool does not raise here: the service is still
        returned and EmptyCredentialSet surfaces from the first rotation
        until credentials are stored.
        """
        platform_config = config_provider.get_platform_config()
        storage_config = config_provider.get_storage_config()

        # Resources created here are owned (and closed) by the service
        closers = []
        if redis_client is None:
            storage = StorageModule(storage_config.redis_url)
            redis_client = await storage.connect()
            closers.append(storage.disconnect)

        store = CredentialStore(redis_client, key=storage_config.credentials_key)
        rotator = CredentialRotator(
            store,
            auth_token=platform_config.auth_token,
            bootstrap_record=platform_config.bootstrap_record,
        )

        try:
            await rotator.open()
        except EmptyCredentialSet:
            # Observed credentials may still fill the pool later
            logger.warning("Credential store is empty - rotation will fail until credentials are stored")
        except Exception:
            for closer in reversed(closers):
                await closer()
            raise

        guest_cache = GuestTokenCache(
            auth_token=platform_config.auth_token,
            guest_token_url=platform_config.guest_token_url,
            http_client=http_client,
            timeout=platform_config.request_timeout,
        )

        logger.info(f"Built authentication service with {rotator.pool_size} pooled credential(s)")
        return AuthService(rotator, guest_cache, closers=closers)
