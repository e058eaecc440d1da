"""Authentication headers for SharePoint REST requests.

Bearer tokens are supplied by the caller (or configuration); acquiring them
is left to the identity provider. Write requests additionally carry a form
digest obtained from ``/_api/contextinfo``, which is cached until it expires.
"""

import logging
import time
from collections.abc import Callable
from typing import Optional

logger = logging.getLogger(__name__)

# Refresh the digest slightly before the server-side timeout.
DIGEST_EXPIRY_MARGIN_SECONDS = 60


class Auth:
    """Holds the credentials used to sign requests to one site."""

    def __init__(self, access_token: Optional[str] = None):
        """Initialize Auth.

        Args:
            access_token: OAuth bearer token, or None for anonymous access.
        """
        self.access_token = access_token
        self._digest: Optional[str] = None
        self._digest_expires_at = 0.0

    @property
    def is_authenticated(self) -> bool:
        """Whether a bearer token is available."""
        return bool(self.access_token)

    def get_headers(self) -> dict[str, str]:
        """Return the authorization headers for a request."""
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def get_request_digest(self, fetch: Callable[[], tuple[str, int]]) -> str:
        """Return a valid form digest, fetching a new one when needed.

        Args:
            fetch: Callable returning ``(digest, timeout_seconds)`` from the
                site's context info endpoint.
        """
        now = time.monotonic()
        if self._digest is None or now >= self._digest_expires_at:
            digest, timeout_seconds = fetch()
            self._digest = digest
            self._digest_expires_at = now + max(
                0, timeout_seconds - DIGEST_EXPIRY_MARGIN_SECONDS
            )
            logger.debug(f"Fetched new request digest, valid for {timeout_seconds}s")
        return self._digest

    def invalidate_digest(self) -> None:
        """Forget the cached form digest."""
        self._digest = None
        self._digest_expires_at = 0.0
