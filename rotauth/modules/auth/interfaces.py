"""Authentication interfaces following Black Box Design principles."""
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Protocol

# Fields every credential record written by this package carries
CSRF_TOKEN_FIELD = "csrf_token"
COOKIE_FIELD = "cookie"


class CredentialStoreProtocol(Protocol):
    """Protocol for credential stores - allows swappable backends."""

    async def connect(self) -> bool:
        """Verify the store is reachable."""
        ...

    async def query_all(self) -> List[Dict[str, str]]:
        """
        Get every stored record.

        Returns:
            Records in traversal order, without storage-internal identifiers
        """
        ...

    async def count(self) -> int:
        """Get number of stored records."""
        ...

    async def insert(self, record: Dict[str, str]) -> bool:
        """
        Store a record.

        Returns:
            True if the record was written
        """
        ...


@dataclass(frozen=True)
class AuthCredentials:
    """One user credential bundle stamped with the shared auth token."""
    auth_token: str
    csrf_token: Optional[str]
    cookie: Optional[str]
    extra: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_record(cls, auth_token: str, record: Mapping[str, str]) -> "AuthCredentials":
        """Build credentials from a stored record."""
        extra = {k: v for k, v in record.items() if k not in (CSRF_TOKEN_FIELD, COOKIE_FIELD)}
        return cls(
            auth_token=auth_token,
            csrf_token=record.get(CSRF_TOKEN_FIELD),
            cookie=record.get(COOKIE_FIELD),
            extra=extra,
        )

    def as_dict(self) -> Dict[str, Optional[str]]:
        """Flatten to a single mapping."""
        return {
            **self.extra,
            "auth_token": self.auth_token,
            CSRF_TOKEN_FIELD: self.csrf_token,
            COOKIE_FIELD: self.cookie,
        }


@dataclass(frozen=True)
class GuestCredentials:
    """Anonymous credentials: the shared auth token plus a guest token."""
    auth_token: str
    guest_token: str = ""
