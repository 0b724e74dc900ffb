"""
Authentication Module - Black Box Interface

Purpose: Supply platform credentials for outgoing requests
Interface: AuthFactory.build(), AuthService.get_current_or_next_credential(),
           get_guest_credential(), store_observed_credential()
Hidden: Rotation snapshots, guest token caching, cookie grammar

Any component issuing platform requests depends only on AuthService.
"""

from .factory import AuthFactory
from .interfaces import AuthCredentials, GuestCredentials
from .service import AuthService

__all__ = ["AuthFactory", "AuthService", "AuthCredentials", "GuestCredentials"]
