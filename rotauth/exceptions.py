"""
Exceptions for rotauth.

Every failure is a distinct type so callers can branch on the kind:
- Credential pool problems (store reachability, empty pool, failed writes)
- Guest token fetch failures
- JSON extraction failures (missing key, malformed span)
"""

from typing import Optional


class RotauthError(Exception):
    """Base exception for rotauth."""
    pass


# --- Credential pool ---
class CredentialError(RotauthError):
    """Base for credential store and rotation failures."""
    pass


class StoreUnavailable(CredentialError):
    """The credential store could not be reached."""
    pass


class EmptyCredentialSet(CredentialError):
    """The credential store holds no records to rotate through."""
    pass


class StoreWriteFailed(CredentialError):
    """The credential store reported a failed insert."""
    pass


# --- Guest tokens ---
class GuestTokenFetchFailed(RotauthError):
    """The guest token endpoint failed or returned no token."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


# --- Extraction ---
class ExtractionError(RotauthError):
    """Base for key-based JSON extraction failures."""
    pass


class KeyNotFound(ExtractionError, KeyError):
    """The requested key does not occur in the document."""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Key not found in document: {self.key!r}"


class MalformedJSONSpan(ExtractionError, ValueError):
    """The text bound to the key is not a well-formed JSON value."""

    def __init__(self, key: str, message: str, span: str = ""):
        super().__init__(f"{key}: {message}")
        self.key = key
        self.span = span


__all__ = [
    "RotauthError",
    "CredentialError",
    "StoreUnavailable",
    "EmptyCredentialSet",
    "StoreWriteFailed",
    "GuestTokenFetchFailed",
    "ExtractionError",
    "KeyNotFound",
    "MalformedJSONSpan",
]
