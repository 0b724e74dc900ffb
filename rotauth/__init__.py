"""
rotauth - Rotating Platform Credentials

Keeps a pool of user credentials for a social platform's internal API,
fetches and caches anonymous guest tokens, and pulls single fields out of
large JSON responses.

Architecture:
- Each module is self-contained with clear interfaces
- Dependencies (Redis client, HTTP client, config) are injected
- One AuthService is built per process by AuthFactory

Modules:
- auth: Credential rotation, guest tokens, observed-credential capture
- storage: Credential persistence (Redis)
- extract: Key-based JSON value extraction
"""

from .modules.extract import extract_value

__version__ = "1.0.0"

__all__ = ["extract_value"]
